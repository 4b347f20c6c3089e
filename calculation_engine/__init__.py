"""calculation_engine package"""
from .calculators import (
    CargoCalculator, RailCalculator, StevedoreCalculator, StorageCalculator, VesselCalculator,
)
from .currency import CurrencyNormalizer, get_currency_normalizer, reset_currency_normalizer
from .engine import CalculationEngine
from .results import CalculationResult
__all__ = [
    "VesselCalculator","CargoCalculator","RailCalculator","StorageCalculator","StevedoreCalculator",
    "CurrencyNormalizer","get_currency_normalizer","reset_currency_normalizer",
    "CalculationEngine","CalculationResult",
]
