import plotly.graph_objs as go

from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dimension import field_key
from wine_browser.core.records import RecordStore, WineRecord
from wine_browser.views.price_to_points_view import PriceToPointsView, price_points_key


def _make_index():
    store = RecordStore(
        [
            WineRecord("US", "Malbec", 90, 30),
            WineRecord("FR", "Malbec", 90, 30),
            WineRecord("US", "Syrah", 85, 60),
            WineRecord("FR", "Merlot", 92, None),
            WineRecord("FR", "Merlot", 95, 150),
        ]
    )
    return CrossfilterIndex(store)


def test_price_points_key():
    assert price_points_key(WineRecord("US", "Malbec", 90, 30)) == (30, 90)
    assert price_points_key(WineRecord("US", "Malbec", 90, None)) is None


def test_identical_pairs_merge_and_missing_prices_are_left_out():
    view = PriceToPointsView(_make_index())

    df = view.compute_data()

    assert list(zip(df["price"], df["points"], df["count"])) == [
        (30, 90, 2),
        (60, 85, 1),
        (150, 95, 1),
    ]


def test_price_range_follows_filters():
    index = _make_index()
    view = PriceToPointsView(index)

    assert view.price_range() == (30, 150)

    index.dimension(field_key("country")).filter_exact("US")
    assert view.price_range() == (30, 60)

    fig = view.render_figure(view.compute_data())
    assert isinstance(fig, go.Figure)
    assert list(fig.layout.xaxis.range) == [30, 60]
    assert fig.layout.xaxis.title.text == "Price in $"
