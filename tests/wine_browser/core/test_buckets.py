import math

import pytest

from wine_browser.core.buckets import (
    POINTS_BUCKETS,
    PRICE_BUCKETS,
    UNDEFINED_LABEL,
    Bucket,
    BucketScheme,
)
from wine_browser.core.exceptions import ConfigurationError


@pytest.mark.parametrize("scheme", [POINTS_BUCKETS, PRICE_BUCKETS])
def test_buckets_partition_the_integers(scheme):
    for value in range(0, 500):
        containing = [
            b for b in scheme.buckets
            if b.low <= value and (b.high is None or value <= b.high)
        ]
        # no gaps, no overlaps
        assert len(containing) == 1, value
        assert scheme(value) == containing[0].label


@pytest.mark.parametrize(
    "value, label",
    [
        (0, "Bad: Below 83"),
        (82, "Bad: Below 83"),
        (83, "Average: 83 to 87"),
        (87, "Average: 83 to 87"),
        (88, "Good: 88 to 91"),
        (91, "Good: 88 to 91"),
        (92, "Very Good: 92 to 95"),
        (95, "Very Good: 92 to 95"),
        (96, "Excellent: Above 95"),
        (100, "Excellent: Above 95"),
        (150, "Excellent: Above 95"),
        (82.5, "Bad: Below 83"),
    ],
)
def test_points_bucket_boundaries(value, label):
    assert POINTS_BUCKETS(value) == label


@pytest.mark.parametrize(
    "value, label",
    [
        (0, "$1 to $25"),
        (25, "$1 to $25"),
        (26, "$25 to $50"),
        (50, "$25 to $50"),
        (51, "$50 to $75"),
        (75, "$50 to $75"),
        (76, "$75 to $100"),
        (100, "$75 to $100"),
        (101, "Above $100"),
        (3300, "Above $100"),
    ],
)
def test_price_bucket_boundaries(value, label):
    assert PRICE_BUCKETS(value) == label


@pytest.mark.parametrize("value", [None, -1, -0.5, math.nan])
def test_out_of_domain_values_map_to_unknown(value):
    assert PRICE_BUCKETS(value) == UNDEFINED_LABEL
    assert POINTS_BUCKETS(value) == UNDEFINED_LABEL


def test_labels_are_ordered_with_unknown_last():
    assert PRICE_BUCKETS.labels == (
        "$1 to $25",
        "$25 to $50",
        "$50 to $75",
        "$75 to $100",
        "Above $100",
        "Unknown",
    )
    assert POINTS_BUCKETS.order("Bad: Below 83") < POINTS_BUCKETS.order("Excellent: Above 95")
    assert POINTS_BUCKETS.order(UNDEFINED_LABEL) == len(POINTS_BUCKETS.buckets)


def test_closed_last_bucket_sends_larger_values_to_unknown():
    scheme = BucketScheme("small", [Bucket("a", 0, 9), Bucket("b", 10, 19)])

    assert scheme(19) == "b"
    assert scheme(19.5) == "b"
    assert scheme(20) == UNDEFINED_LABEL


@pytest.mark.parametrize(
    "buckets",
    [
        [Bucket("a", 0, 9), Bucket("b", 11, 19)],   # gap
        [Bucket("a", 0, 10), Bucket("b", 10, 19)],  # overlap
        [Bucket("a", 0), Bucket("b", 10, 19)],      # open bucket not last
        [Bucket("a", 0, 9), Bucket("a", 10)],       # duplicate label
        [],
    ],
)
def test_invalid_schemes_are_rejected(buckets):
    with pytest.raises(ConfigurationError):
        BucketScheme("bad", buckets)
