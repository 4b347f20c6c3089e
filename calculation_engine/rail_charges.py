"""
calculation_engine/rail_charges.py
Haulage, terminal handling, hour-slab demurrage and siding selection.
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from calculation_engine.lookup_utils import record_miss
from knowledge_base.records import (
    HaulageRecord,
    RailDemurrageSlabRecord,
    SidingRecord,
    TerminalHandlingRecord,
    WagonRecord,
)
from monitoring import get_logger

log = get_logger(__name__)

LOADED_WAGON = "Loaded Wagon"
CONTAINER_HAULAGE_CATEGORIES = ("20ft_Container", "40ft_Container", "Above 40ft_Container")
NOT_AVAILABLE = "N/A"


def haulage_rate(
    rows: Sequence[HaulageRecord], category: str, description: str = LOADED_WAGON
) -> Optional[float]:
    row = next((r for r in rows if r.category == category and r.description == description), None)
    if row is None:
        record_miss("haulage", category=category, description=description)
        return None
    return row.rate


@dataclass
class ContainerHaulage:
    amount: float
    missed: list[str]


def container_haulage(
    rows: Sequence[HaulageRecord], counts: dict[str, int]
) -> Optional[ContainerHaulage]:
    """
    Σ boxes × loaded-wagon rate over the container size categories.
    Categories with no rate are listed in `missed`; None when no category
    with boxes could be priced.
    """
    total = 0.0
    priced = 0
    missed: list[str] = []
    for category in CONTAINER_HAULAGE_CATEGORIES:
        count = counts.get(category, 0)
        if count <= 0:
            continue
        rate = haulage_rate(rows, category)
        if rate is None:
            missed.append(category)
            continue
        total += count * rate
        priced += 1
    if missed and not priced:
        return None
    return ContainerHaulage(amount=total, missed=missed)


def bulk_haulage(rows: Sequence[HaulageRecord], weight: float) -> Optional[float]:
    rate = haulage_rate(rows, "non_Container")
    return None if rate is None else weight * rate


def terminal_handling(
    rows: Sequence[TerminalHandlingRecord], weight: float, containerised: bool
) -> Optional[float]:
    cargo_type = "containerised" if containerised else "non_containerised"
    row = next((r for r in rows if r.cargo_type == cargo_type), None)
    if row is None:
        record_miss("terminal_handling", cargo_type=cargo_type)
        return None
    return weight * row.rate


@dataclass
class RailDemurrage:
    chargeable_hours: float
    rate: float
    amount: float


def rail_demurrage(
    slabs: Sequence[RailDemurrageSlabRecord],
    total_hours: float,
    free_hours: float,
    num_wagons: int,
) -> RailDemurrage:
    """Flat per-wagon charge from the single slab containing the chargeable hours."""
    chargeable = max(0.0, total_hours - free_hours)
    if chargeable <= 0:
        return RailDemurrage(chargeable_hours=0.0, rate=0.0, amount=0.0)

    slab = next((s for s in slabs if s.start_hours <= chargeable <= s.end_hours), None)
    if slab is None:
        record_miss("rail_demurrage", chargeable_hours=chargeable)
        return RailDemurrage(chargeable_hours=chargeable, rate=0.0, amount=0.0)
    return RailDemurrage(chargeable_hours=chargeable, rate=slab.rate, amount=slab.rate * num_wagons)


# ── Logistics ─────────────────────────────────────────────────────────────────

@dataclass
class SidingPlan:
    loading_type: str        # Full Rake | Partial Rake
    rake_size: int
    wagon_group: str
    railway_siding: str = NOT_AVAILABLE
    railway_yard: str = NOT_AVAILABLE
    siding_type: str = NOT_AVAILABLE
    holding_capacity: str = NOT_AVAILABLE


def select_siding(
    sidings: Sequence[SidingRecord], wagon: WagonRecord, num_wagons: int
) -> SidingPlan:
    full = num_wagons >= wagon.rake_size
    capacity = "Full" if full else "Partial"
    plan = SidingPlan(
        loading_type="Full Rake" if full else "Partial Rake",
        rake_size=wagon.rake_size,
        wagon_group=wagon.wagon_group,
    )

    siding = (
        next((s for s in sidings
              if s.box_type == wagon.wagon_type and s.yard_capacity_type == capacity), None)
        or next((s for s in sidings if s.box_type == wagon.wagon_type), None)
        or (sidings[0] if sidings else None)
    )
    if siding is None:
        log.warning("No railway siding available", wagon_type=wagon.wagon_type)
        return plan

    plan.railway_siding   = siding.lines or NOT_AVAILABLE
    plan.railway_yard     = siding.railway_yard or NOT_AVAILABLE
    plan.siding_type      = siding.line_type or NOT_AVAILABLE
    plan.holding_capacity = siding.holding_capacity or NOT_AVAILABLE
    return plan
