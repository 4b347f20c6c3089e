"""
calculation_engine/storage_charges.py
Required storage area and immediate / lease storage charges.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from calculation_engine.lookup_utils import record_miss
from knowledge_base.records import (
    ImmediateStorageRateRecord,
    LeaseRecord,
    StowageFactorRecord,
)
from monitoring import get_logger

log = get_logger(__name__)

PERIOD_DAYS = 15

# size band → (stowage row, m² per box when the row's Measure is blank)
CONTAINER_FOOTPRINT = {
    "upto_20ft":  ("20 Feet", 14.8),
    "20_to_40ft": ("40 Feet", 29.7),
    "above_40ft": ("45 Feet", 33.4),
}

# UoMs priced directly on the occupied area (or track length)
_DIRECT_UOMS = {"per sq. m.", "square meter", "per rm"}


def find_stowage(rows: Sequence[StowageFactorRecord], cargo: str) -> Optional[StowageFactorRecord]:
    return next((r for r in rows if r.cargo == cargo), None)


def cargo_area(rows: Sequence[StowageFactorRecord], cargo: str, weight: float) -> float:
    """weight / Measure (tons per m²); unknown cargo needs no area."""
    if not cargo or weight <= 0:
        return 0.0
    row = find_stowage(rows, cargo)
    if row is None:
        record_miss("stowage_factor", cargo=cargo)
        return 0.0
    return weight / (row.measure or 1.0)


def container_area(rows: Sequence[StowageFactorRecord], counts: dict[str, int]) -> float:
    """Σ boxes × footprint; 20–40 ft boxes use the 40 ft footprint, larger ones the 45 ft."""
    total = 0.0
    for band, (row_name, default_measure) in CONTAINER_FOOTPRINT.items():
        count = counts.get(band, 0)
        if count <= 0:
            continue
        row = find_stowage(rows, row_name)
        if row is None:
            record_miss("stowage_factor", cargo=row_name)
            continue
        total += count * (row.measure or default_measure)
    return total


@dataclass
class StorageCharge:
    amount: float
    rate: float
    rate_area: float
    periods: int = 0
    months: int = 0


def find_immediate_rate(
    rows: Sequence[ImmediateStorageRateRecord], area_type: str, days: int
) -> Optional[ImmediateStorageRateRecord]:
    return next(
        (r for r in rows if r.area_type == area_type and r.start_day <= days <= r.end_day),
        None,
    )


def immediate_storage(
    rows: Sequence[ImmediateStorageRateRecord],
    area: float,
    area_type: str,
    days: int,
) -> Optional[StorageCharge]:
    """(area / rate_area) × rate per 15 days × ceil(days / 15)."""
    row = find_immediate_rate(rows, area_type, days)
    if row is None:
        record_miss("immediate_storage", area_type=area_type, days=days)
        return None
    periods = math.ceil(days / PERIOD_DAYS)
    amount = (area / row.rate_area) * row.rate_per_15_days * periods
    return StorageCharge(
        amount=amount, rate=row.rate_per_15_days, rate_area=row.rate_area, periods=periods,
    )


def find_lease(
    rows: Sequence[LeaseRecord], description: str, location: Optional[str] = None
) -> Optional[LeaseRecord]:
    for r in rows:
        if r.description != description:
            continue
        if location and r.location != location:
            continue
        return r
    return None


def lease_storage(lease: Optional[LeaseRecord], area: float, months: int = 1) -> Optional[StorageCharge]:
    """
    Per-area and per-running-metre leases charge area × rate × months; other
    UoMs charge per leased block of `Area`.
    """
    if lease is None:
        record_miss("lease_storage")
        return None
    months = months or 1
    if lease.unit_of_measure in _DIRECT_UOMS:
        amount = area * lease.rate_per_month * months
    else:
        amount = (area / lease.lease_area) * lease.rate_per_month * months
    return StorageCharge(
        amount=amount, rate=lease.rate_per_month, rate_area=lease.lease_area, months=months,
    )
