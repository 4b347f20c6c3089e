"""
calculation_engine/vessel_charges.py
Port dues, pilotage, berth hire and stay-hours estimation.

Rates in the vessel masters are per GT. Foreign-trade rates are quoted in USD
and are converted with the resolved INR/USD rate; coastal rates are INR.
"""
from typing import Optional, Sequence

from calculation_engine.classifier import pilotage_column, throughput_heuristic, vessel_type
from calculation_engine.lookup_utils import record_miss, round_half_up, to_inr
from knowledge_base.records import CargoRecord, PilotageRecord, VesselRateRecord
from monitoring import get_logger

log = get_logger(__name__)


def _find_vessel_row(rows: Sequence[VesselRateRecord], key: str) -> Optional[VesselRateRecord]:
    key_l = key.strip().lower()
    return next((r for r in rows if r.vessel_type.strip().lower() == key_l), None)


def port_dues(
    rows: Sequence[VesselRateRecord],
    gross_tonnage: float,
    trade_type: str,
    cargo: Optional[str],
    inr_per_usd: float,
) -> Optional[float]:
    """GT × rate (× INR/USD for foreign trade)."""
    key = vessel_type(cargo)
    row = _find_vessel_row(rows, key)
    if row is None:
        record_miss("port_dues", vessel_type=key)
        return None
    rate = row.rate_for(trade_type)
    if rate is None:
        record_miss("port_dues", vessel_type=key, trade_type=trade_type, reason="blank rate")
        return None
    amount = to_inr(gross_tonnage * rate, trade_type, inr_per_usd)
    log.debug("Port dues", vessel_type=key, rate=rate, gt=gross_tonnage, amount=amount)
    return amount


def pilotage(
    rows: Sequence[PilotageRecord],
    gross_tonnage: float,
    trade_type: str,
    cargo: Optional[str],
    inr_per_usd: float,
) -> Optional[float]:
    """GT-bracketed pilotage; row selected by GT range and trade category."""
    category = (trade_type or "Foreign").strip().lower()
    row = next(
        (r for r in rows
         if r.gt_min <= gross_tonnage <= r.gt_max and r.category.lower() == category),
        None,
    )
    if row is None:
        record_miss("pilotage", gt=gross_tonnage, category=trade_type)
        return None

    column = pilotage_column(cargo)
    rate = row.rates.get(column)
    if rate is None:
        record_miss("pilotage", column=column, gt=gross_tonnage, reason="no rate in column")
        return None
    amount = to_inr(gross_tonnage * rate, trade_type, inr_per_usd)
    log.debug("Pilotage", column=column, rate=rate, gt=gross_tonnage, amount=amount)
    return amount


def berth_hire(
    rows: Sequence[VesselRateRecord],
    hours: float,
    gross_tonnage: float,
    trade_type: str,
    cargo: Optional[str],
    inr_per_usd: float,
) -> Optional[float]:
    """GT × hours × rate (× INR/USD for foreign trade). Unmatched types use the first row."""
    if not rows:
        record_miss("berth_hire", reason="empty table")
        return None
    key = vessel_type(cargo)
    row = _find_vessel_row(rows, key) or rows[0]
    rate = row.rate_for(trade_type)
    if rate is None:
        record_miss("berth_hire", vessel_type=row.vessel_type, reason="blank rate")
        return None
    amount = to_inr(gross_tonnage * hours * rate, trade_type, inr_per_usd)
    log.debug("Berth hire", vessel_type=row.vessel_type, rate=rate, hours=hours, amount=amount)
    return amount


def cargo_throughput(cargo_record: Optional[CargoRecord], cargo: Optional[str]) -> float:
    """Tons/day: the cargo master's discharge (then load) rate, else the keyword heuristic."""
    if cargo_record is not None:
        rate = cargo_record.discharge_rate_per_day or cargo_record.load_rate_per_day
        if rate and rate > 0:
            return rate
    return throughput_heuristic(cargo)


def estimate_stay_hours(
    quantity: float,
    cargo: Optional[str],
    cargo_record: Optional[CargoRecord] = None,
) -> int:
    rate = cargo_throughput(cargo_record, cargo)
    days = max((quantity or 0) / rate, 0.1)
    return round_half_up(days * 24)
