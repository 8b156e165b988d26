from .country_count_view import CountryCountView
from .country_distribution_view import CountryDistributionView
from .average_points_view import AveragePointsView
from .points_distribution_view import PointsDistributionView
from .national_variety_view import NationalVarietyView
from .price_to_points_view import PriceToPointsView

__all__ = [
    "CountryCountView",
    "CountryDistributionView",
    "AveragePointsView",
    "PointsDistributionView",
    "NationalVarietyView",
    "PriceToPointsView",
]
