"""
calculation_engine/stevedoring.py
Gang sizing, composite labour cost and royalty.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from calculation_engine.lookup_utils import record_miss
from knowledge_base.records import (
    LABOUR_CATEGORIES,
    CargoRecord,
    CompositeRateRecord,
    LabourDatumRecord,
    LabourManningRecord,
    RoyaltyRecord,
)
from monitoring import get_logger

log = get_logger(__name__)

DEFAULT_CARGO_NORM = 1000.0


def find_datum(
    rows: Sequence[LabourDatumRecord], line_no: str, mobile_crane: str
) -> Optional[LabourDatumRecord]:
    crane = (mobile_crane or "N").strip().upper()
    return next((r for r in rows if r.line_no == line_no and r.mobile_crane == crane), None)


def gangs_required(weight: float, datum_per_crane: float) -> int:
    return math.ceil(weight / datum_per_crane)


def cargo_norm(cargo_record: Optional[CargoRecord]) -> float:
    if cargo_record is None:
        return DEFAULT_CARGO_NORM
    rates = [r for r in (cargo_record.discharge_rate_per_day, cargo_record.load_rate_per_day) if r]
    norm = max(rates) if rates else 0
    return norm if norm > 0 else DEFAULT_CARGO_NORM


def work_days(weight: float, norm: float) -> int:
    return math.ceil(weight / norm)


# ── Composite labour ──────────────────────────────────────────────────────────

@dataclass
class Manning:
    on_board: LabourManningRecord
    shore: LabourManningRecord


def manning_for_line(rows: Sequence[LabourManningRecord], line_no: str) -> Optional[Manning]:
    on_board = next((r for r in rows if r.line_no == line_no and r.on_board), None)
    shore = next((r for r in rows if r.line_no == line_no and not r.on_board), None)
    if on_board is None or shore is None:
        return None
    return Manning(on_board=on_board, shore=shore)


def rate_label(category: str) -> str:
    """'Winch_driver' → 'Winch driver' as spelled in the composite rate master."""
    return category.replace("_", " ", 1)


def gang_cost(
    manning: Manning,
    rates: Sequence[CompositeRateRecord],
    shift: str,
    cargo_type_code: str,
) -> float:
    cost = 0.0
    for category in LABOUR_CATEGORIES:
        count = manning.on_board.headcount.get(category, 0)
        if count == 0:
            continue
        label = rate_label(category)
        row = next(
            (r for r in rates
             if r.labour_category == label and r.shift == shift and r.cargo_type_code == cargo_type_code),
            None,
        )
        if row is None:
            record_miss("composite_rate", category=label, shift=shift, cargo_type=cargo_type_code)
            continue
        cost += count * row.rate
    return cost


def composite_cost(
    manning_rows: Sequence[LabourManningRecord],
    rates: Sequence[CompositeRateRecord],
    line_no: str,
    shift: str,
    cargo_type_code: str,
    gangs: int,
) -> Optional[float]:
    """Per-gang on-board labour cost × gangs required."""
    manning = manning_for_line(manning_rows, line_no)
    if manning is None:
        record_miss("labour_manning", line_no=line_no, reason="on-board or shore row missing")
        return None
    per_gang = gang_cost(manning, rates, shift, cargo_type_code)
    log.debug("Composite labour", line_no=line_no, per_gang=per_gang, gangs=gangs)
    return per_gang * gangs


# ── Royalty ───────────────────────────────────────────────────────────────────

@dataclass
class Royalty:
    stevedoring: float
    shore_handling: float


def royalty(rows: Sequence[RoyaltyRecord], weight: float, royalty_type: str) -> Optional[Royalty]:
    row = next((r for r in rows if r.cargo_type == royalty_type), None)
    if row is None:
        record_miss("royalty", royalty_type=royalty_type)
        return None
    return Royalty(
        stevedoring=weight * row.stevedoring_rate,
        shore_handling=weight * row.shore_handling_rate,
    )
