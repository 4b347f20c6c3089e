"""
calculation_engine/cargo_charges.py
Wharfage (cargo and container modes) and slab-based demurrage.
"""
from typing import Iterable, Optional, Sequence

from calculation_engine.lookup_utils import COASTAL, FOREIGN, filter_matches, record_miss
from knowledge_base.records import CargoRecord, DemurrageSlabRecord, WharfageRateRecord
from monitoring import get_logger
from query_processor.models import ContainerLine

log = get_logger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Wharfage, cargo mode
# ─────────────────────────────────────────────────────────────────────────────

def find_wharfage_rate(
    rows: Sequence[WharfageRateRecord], sor_code: str
) -> Optional[WharfageRateRecord]:
    if not sor_code:
        return None
    return next((r for r in rows if r.sor_code == sor_code), None)


def wharfage(
    rate_record: Optional[WharfageRateRecord],
    weight: float,
    cargo_value: float,
    trade_type: str,
) -> Optional[float]:
    """
    Value basis: the rate is a percentage of declared cargo value.
    Weight and Unit basis: weight × rate.
    """
    if rate_record is None:
        record_miss("wharfage", reason="no rate record for SoR code")
        return None
    rate = rate_record.rate_for(trade_type)
    if rate is None:
        record_miss("wharfage", sor=rate_record.sor_code, trade_type=trade_type, reason="blank rate")
        return None
    if rate_record.cost_basis == "Value":
        amount = cargo_value * rate / 100
    else:
        amount = weight * rate
    log.debug(
        "Wharfage",
        sor=rate_record.sor_code, basis=rate_record.cost_basis, rate=rate, amount=amount,
    )
    return amount


def cargo_wharfage(
    cargo_record: Optional[CargoRecord],
    rates: Sequence[WharfageRateRecord],
    weight: float,
    cargo_value: float,
    trade_type: str,
) -> Optional[float]:
    sor = cargo_record.sor_code if cargo_record else ""
    return wharfage(find_wharfage_rate(rates, sor), weight, cargo_value, trade_type)


# ─────────────────────────────────────────────────────────────────────────────
# Wharfage, container mode
# ─────────────────────────────────────────────────────────────────────────────

STANDARD, MAFI, SHIPPER_OWN = "Standard", "MAFI", "Shipper-Own"
EMPTY, LADEN = "Empty", "Laden"

# INR per box: class → fill state → size band → trade type
CONTAINER_RATES: dict[str, dict[str, dict[str, dict[str, float]]]] = {
    STANDARD: {
        EMPTY: {
            "upto_20ft":  {COASTAL: 495.0,  FOREIGN: 825.0},
            "20_to_40ft": {COASTAL: 745.0,  FOREIGN: 1240.0},
            "above_40ft": {COASTAL: 990.0,  FOREIGN: 1650.0},
        },
        LADEN: {
            "upto_20ft":  {COASTAL: 990.0,  FOREIGN: 1650.0},
            "20_to_40ft": {COASTAL: 1485.0, FOREIGN: 2475.0},
            "above_40ft": {COASTAL: 1980.0, FOREIGN: 3300.0},
        },
    },
    MAFI: {
        EMPTY: {
            "upto_20ft":  {COASTAL: 745.0,  FOREIGN: 1240.0},
            "20_to_40ft": {COASTAL: 1115.0, FOREIGN: 1860.0},
            "above_40ft": {COASTAL: 1485.0, FOREIGN: 2475.0},
        },
        LADEN: {
            "upto_20ft":  {COASTAL: 1490.0, FOREIGN: 2480.0},
            "20_to_40ft": {COASTAL: 2230.0, FOREIGN: 3715.0},
            "above_40ft": {COASTAL: 2970.0, FOREIGN: 4950.0},
        },
    },
}

# Shipper-own boxes pay ad valorem on declared cargo value (percent)
SHIPPER_OWN_AD_VALOREM = {FOREIGN: 0.4250, COASTAL: 0.2550}


def container_rate(container_class: str, fill_state: str, size_band: str, trade_type: str) -> Optional[float]:
    try:
        return CONTAINER_RATES[container_class][fill_state][size_band][trade_type]
    except KeyError:
        return None


def container_wharfage(
    lines: Iterable[ContainerLine],
    trade_type: str,
    cargo_value: float = 0.0,
) -> float:
    """Σ count × schedule rate, plus ad valorem on cargo value when shipper-own boxes are present."""
    total = 0.0
    shipper_own = 0
    for line in lines:
        if line.count <= 0:
            continue
        if line.container_class == SHIPPER_OWN:
            shipper_own += line.count
            continue
        rate = container_rate(line.container_class, line.fill_state, line.size_band, trade_type)
        if rate is None:
            record_miss(
                "container_wharfage",
                container_class=line.container_class, fill_state=line.fill_state,
                size_band=line.size_band, trade_type=trade_type,
            )
            continue
        total += line.count * rate

    if shipper_own:
        pct = SHIPPER_OWN_AD_VALOREM.get(trade_type, SHIPPER_OWN_AD_VALOREM[FOREIGN])
        total += cargo_value * pct / 100
    return total


# ─────────────────────────────────────────────────────────────────────────────
# Demurrage, day slabs
# ─────────────────────────────────────────────────────────────────────────────

def matching_slabs(
    slabs: Iterable[DemurrageSlabRecord],
    cargo_category: str,
    operation_type: str,
    trade_type: str,
    storage_type: str,
) -> list[DemurrageSlabRecord]:
    matched = [
        s for s in slabs
        if filter_matches(s.cargo_category, cargo_category, substring=True)
        and filter_matches(s.operation_type, operation_type)
        and filter_matches(s.trade_type, trade_type)
        and filter_matches(s.storage_type, storage_type)
    ]
    return sorted(matched, key=lambda s: s.start_day)


def slab_demurrage(
    slabs: Iterable[DemurrageSlabRecord],
    days_after_free: float,
    quantity: float,
    inr_per_usd: float,
    cargo_category: str = "",
    operation_type: str = "",
    trade_type: str = "",
    storage_type: str = "",
) -> Optional[float]:
    """
    Charge quantity × days × rate for each slab overlapping the window of day
    indices 0..days_after_free. Days no slab covers are not charged.

    Returns 0 without looking at the slabs when there is nothing to charge,
    and None when no slab matches the filters.
    """
    if days_after_free <= 0 or quantity <= 0:
        return 0.0

    ladder = matching_slabs(slabs, cargo_category, operation_type, trade_type, storage_type)
    if not ladder:
        record_miss(
            "demurrage_slabs",
            cargo_category=cargo_category, operation_type=operation_type,
            trade_type=trade_type, storage_type=storage_type,
        )
        return None

    total = 0.0
    covered = 0
    for slab in ladder:
        days = min(slab.end_day, days_after_free) - max(slab.start_day, 0) + 1
        if days <= 0:
            continue
        rate = slab.rate * inr_per_usd if slab.rate_currency == "USD" else slab.rate
        total += quantity * days * rate
        covered += days

    if covered < days_after_free + 1:
        log.info(
            "Demurrage days not covered by any slab",
            requested=days_after_free, covered=covered,
        )
    return total


def flat_demurrage(rate_per_day: Optional[float], days_after_free: float, quantity: float) -> float:
    """Cargo-master flat rate: days × quantity × rate."""
    if days_after_free <= 0 or not rate_per_day or rate_per_day <= 0:
        return 0.0
    return days_after_free * quantity * rate_per_day
