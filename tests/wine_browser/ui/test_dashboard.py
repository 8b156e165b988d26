import json
import threading
from pathlib import Path

import plotly.graph_objs as go
import pytest

from wine_browser.core.exceptions import ParseError
from wine_browser.core.filter_state import FilterState
from wine_browser.ui.callbacks.callbacks_filters import state_from_chart_click, state_from_controls
from wine_browser.ui.callbacks.callbacks_render import render_dashboard
from wine_browser.ui.dash_app import create_dash_app, load_context
from wine_browser.ui.helpers import sanitise_state, selector_dropdown_options

CSV = (
    "country,variety,points,price\n"
    "US,Malbec,90,30\n"
    "US,Syrah,85,60\n"
    "France,Merlot,97,120\n"
    "France,Syrah,80,\n"
)

VIEW_IDS = [
    "country_count",
    "country_distribution",
    "average_points",
    "points_distribution",
    "national_variety",
    "price_to_points",
]


def _make_config(tmp_path, csv=CSV, on_parse_error="reject"):
    (tmp_path / "wines.csv").write_text(csv)
    config_root = tmp_path / "config"
    config_root.mkdir()
    (config_root / "global.json").write_text(
        json.dumps(
            {
                "ui_title": "Test Wines",
                "data_root": "..",
                "dataset": {"file": "wines.csv", "on_parse_error": on_parse_error},
                "varieties": ["Malbec", "Syrah"],
            }
        )
    )
    return config_root


@pytest.fixture
def ctx(tmp_path, monkeypatch):
    monkeypatch.delenv("WINE_BROWSER_DATA_ROOT", raising=False)
    app_ctx, _ = load_context(_make_config(tmp_path))
    return app_ctx


def test_load_context_builds_index_views_and_selectors(ctx):
    assert ctx.index.size() == 4
    assert [v.id for v in ctx.views] == VIEW_IDS
    assert list(ctx.selectors) == ["country", "variety", "points", "price"]
    assert ctx.data_count.value() == 4

    variety_view = ctx.views[VIEW_IDS.index("national_variety")]
    assert variety_view.varieties == ("Malbec", "Syrah")


def test_render_dashboard_applies_state(ctx):
    options, figures, count_text = render_dashboard(ctx, {"country": "US"})

    assert set(figures) == set(VIEW_IDS)
    assert all(isinstance(f, go.Figure) for f in figures.values())
    assert count_text == "2 of 4 wines selected"

    country_options, variety_options = options[0], options[1]
    # country keeps both options; variety counts follow the country filter
    assert [o["value"] for o in country_options] == ["France", "US"]
    assert {o["value"]: o["label"] for o in variety_options} == {
        "Malbec": "Malbec (1)",
        "Merlot": "Merlot (0)",
        "Syrah": "Syrah (1)",
    }
    merlot = next(o for o in variety_options if o["value"] == "Merlot")
    assert merlot["disabled"] is True

    # re-rendering the same state changes nothing
    again, _, again_text = render_dashboard(ctx, {"country": "US"})
    assert again == options
    assert again_text == count_text

    _, _, cleared_text = render_dashboard(ctx, None)
    assert cleared_text == "4 of 4 wines selected"


def test_stale_selections_are_dropped(ctx):
    state = sanitise_state(ctx.selectors, FilterState(country="Narnia", price="$25 to $50"))
    assert state == FilterState(price="$25 to $50")

    _, _, count_text = render_dashboard(ctx, {"country": "Narnia"})
    assert count_text == "4 of 4 wines selected"


def test_state_from_controls_reset(ctx):
    assert state_from_controls(ctx, "US", None, None, None) == FilterState(country="US")
    assert state_from_controls(ctx, "US", "Syrah", None, None, reset=True) == FilterState()


def test_selected_option_stays_enabled(ctx):
    ctx.selectors["variety"].select("Merlot")
    ctx.selectors["country"].select("US")

    options = selector_dropdown_options(ctx.selectors["variety"])
    merlot = next(o for o in options if o["value"] == "Merlot")

    assert merlot["label"] == "Merlot (0)"
    assert merlot["disabled"] is False


def test_parse_error_aborts_construction(tmp_path, monkeypatch):
    monkeypatch.delenv("WINE_BROWSER_DATA_ROOT", raising=False)
    config_root = _make_config(tmp_path, csv=CSV + "Chile,Malbec,n/a,10\n")

    with pytest.raises(ParseError):
        load_context(config_root)


def test_create_dash_app(tmp_path, monkeypatch):
    monkeypatch.delenv("WINE_BROWSER_DATA_ROOT", raising=False)
    app = create_dash_app(_make_config(tmp_path, on_parse_error="skip"))

    assert app.title == "Test Wines"
    assert app.layout is not None


def test_bundled_config_loads():
    repo_root = Path(__file__).resolve().parents[3]
    app_ctx, _ = load_context(repo_root / "config")

    assert app_ctx.index.size() > 0


def _view(ctx, view_id):
    return next(v for v in ctx.views if v.id == view_id)


def test_chart_click_is_stored_and_filters_other_views(ctx):
    click = {"points": [{"x": "France", "y": 2}]}
    state = state_from_chart_click(ctx, FilterState(), "country_count", click)

    assert state == FilterState(charts={"country_count": "France"})
    assert FilterState.from_dict(state.to_dict()) == state

    options, figures, count_text = render_dashboard(ctx, state.to_dict())

    assert count_text == "2 of 4 wines selected"
    # the clicked chart keeps both countries, the pie only shows France
    assert list(figures["country_count"].data[0].x) == ["France", "US"]
    assert list(figures["country_distribution"].data[0].labels) == ["France"]
    # selector counts follow the chart selection
    assert {o["value"]: o["label"] for o in options[0]} == {"France": "France (2)", "US": "US (0)"}
    assert {o["value"]: o["label"] for o in options[1]}["Malbec"] == "Malbec (0)"

    # clicking the same bar again clears it
    cleared = state_from_chart_click(ctx, state, "country_count", click)
    assert cleared.is_empty()
    _, _, count_text = render_dashboard(ctx, cleared.to_dict())
    assert count_text == "4 of 4 wines selected"
    assert not _view(ctx, "country_count").dimension.has_filter


def test_chart_clicks_combine_with_selectors(ctx):
    state = state_from_controls(ctx, None, "Syrah", None, None)
    state = state_from_chart_click(ctx, state, "points_distribution", {"points": [{"label": "Bad: Below 83"}]})

    assert state == FilterState(variety="Syrah", charts={"points_distribution": "Bad: Below 83"})
    _, _, count_text = render_dashboard(ctx, state.to_dict())
    assert count_text == "1 of 4 wines selected"

    # later dropdown changes keep the chart selection
    kept = state_from_controls(ctx, "France", "Syrah", None, None, charts=state.charts)
    assert kept.charts == {"points_distribution": "Bad: Below 83"}
    assert state_from_controls(ctx, None, None, None, None, reset=True, charts=state.charts) == FilterState()


def test_clicks_on_non_clickable_views_and_stale_chart_keys_are_ignored(ctx):
    click = {"points": [{"x": "US", "y": 50}]}
    assert state_from_chart_click(ctx, FilterState(), "national_variety", click) == FilterState()
    assert state_from_chart_click(ctx, FilterState(), "no_such_view", click) == FilterState()
    assert state_from_chart_click(ctx, FilterState(), "country_count", None) == FilterState()

    stale = FilterState(charts={"country_count": "Narnia", "price_to_points": 30, "country_distribution": "US"})
    assert sanitise_state(ctx.selectors, stale, ctx.views) == FilterState(charts={"country_distribution": "US"})


def test_concurrent_renders_each_see_their_own_state(ctx):
    expected = {"US": "2 of 4 wines selected", "France": "2 of 4 wines selected", None: "4 of 4 wines selected"}
    states = [{"country": "US"}, {"charts": {"country_count": "France"}}, None] * 6
    results = []
    errors = []

    def render(fs_data):
        try:
            options, figures, count_text = render_dashboard(ctx, fs_data)
            pie_labels = list(figures["country_distribution"].data[0].labels)
            results.append((fs_data, count_text, pie_labels))
        except Exception as e:  # surfaced below
            errors.append(e)

    threads = [threading.Thread(target=render, args=(s,)) for s in states]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert errors == []
    assert len(results) == len(states)
    for fs_data, count_text, pie_labels in results:
        if fs_data is None:
            assert count_text == expected[None]
            assert pie_labels == ["France", "US"]
        elif "country" in fs_data:
            assert count_text == expected["US"]
            assert pie_labels == ["US"]
        else:
            assert count_text == expected["France"]
            assert pie_labels == ["France"]
