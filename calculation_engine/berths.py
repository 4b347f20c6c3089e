"""
calculation_engine/berths.py
Berth eligibility for a vessel/cargo combination.
"""
from dataclasses import dataclass, field
from typing import Iterable, Optional

from calculation_engine.classifier import GENERAL_CARGO, berth_capability
from knowledge_base.records import BerthRecord
from monitoring import get_logger

log = get_logger(__name__)

MAX_BERTHS_PER_DOCK = 5
UNKNOWN_DOCK = "Unknown Dock"


@dataclass
class BerthGroup:
    dock_name: str
    berths: list[str] = field(default_factory=list)


def berth_handles(berth: BerthRecord, capability: str) -> bool:
    if capability == GENERAL_CARGO:
        # general cargo goes to plain bulk berths, never to specialised ones
        return berth.bulk and not berth.is_specialised
    return bool(getattr(berth, capability))


def find_eligible_berths(
    berths: Iterable[BerthRecord],
    loa: float,
    draft: float,
    beam: float,
    cargo: Optional[str],
) -> list[BerthGroup]:
    """
    Berths whose quay length, draft and beam ceiling accommodate the vessel and
    whose capability flags match the cargo label.

    Docks and berths keep table order; each dock lists at most five berths.
    """
    capability = berth_capability(cargo)
    groups: dict[str, BerthGroup] = {}

    for b in berths:
        if not (b.quay_length >= loa and b.draft >= draft and beam <= b.beam):
            continue
        if not berth_handles(b, capability):
            continue
        dock = b.dock_name or UNKNOWN_DOCK
        group = groups.setdefault(dock, BerthGroup(dock_name=dock))
        if len(group.berths) < MAX_BERTHS_PER_DOCK:
            group.berths.append(b.name)

    log.debug(
        "Berth eligibility",
        cargo=cargo, capability=capability, loa=loa, draft=draft, beam=beam,
        docks=len(groups),
    )
    return list(groups.values())
