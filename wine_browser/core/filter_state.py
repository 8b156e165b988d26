from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional

from wine_browser.core.selectors import Selector

if TYPE_CHECKING:
    from wine_browser.core.base_view import BaseView

SELECTOR_FIELDS = ("country", "variety", "points", "price")


@dataclass
class FilterState:
    """
    Represents the current user selection.

    Fields:

    - country: selected country, or None for all
    - variety: selected grape variety, or None for all
    - points: selected points bucket label, or None for all
    - price: selected price bucket label, or None for all
    - charts: view id -> key picked by clicking that chart
    """

    country: Optional[str] = None
    variety: Optional[str] = None
    points: Optional[str] = None
    price: Optional[str] = None
    charts: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> FilterState:
        data = data or {}

        def pick(name: str) -> Optional[str]:
            value = data.get(name)
            return value if value not in ("", None) else None

        charts = {
            view_id: key
            for view_id, key in (data.get("charts") or {}).items()
            if key not in ("", None)
        }

        return cls(
            country=pick("country"),
            variety=pick("variety"),
            points=pick("points"),
            price=pick("price"),
            charts=charts,
        )

    def is_empty(self) -> bool:
        return not self.charts and all(getattr(self, name) is None for name in SELECTOR_FIELDS)


def apply_filter_state(
        selectors: Mapping[str, Selector],
        state: FilterState,
        views: Iterable[BaseView] = (),
) -> None:
    """
    Push every selection in `state` onto its selector, and every chart
    selection onto its view.

    Re-applying the same state changes nothing, so callers may apply it
    before every read.
    """
    for name in SELECTOR_FIELDS:
        selector = selectors.get(name)
        if selector is not None:
            selector.select(getattr(state, name))

    for view in views:
        if view.clickable:
            view.select(state.charts.get(view.id))
