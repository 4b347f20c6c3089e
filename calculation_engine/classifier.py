"""
calculation_engine/classifier.py
Keyword classification of free-text cargo labels.

Every classification is an ordered list of (predicate, category) rules; the
first predicate that matches the lower-cased label wins. All calculators share
these lists so a label always lands in the same category regardless of module.
"""
from typing import Any, Callable, Optional, Sequence

Rule = tuple[Callable[[str], bool], Any]


def _any(*words: str) -> Callable[[str], bool]:
    return lambda text: any(w in text for w in words)


def _all(*words: str) -> Callable[[str], bool]:
    return lambda text: all(w in text for w in words)


def classify(label: Optional[str], rules: Sequence[Rule], default: Any) -> Any:
    text = (label or "").strip().lower()
    for predicate, category in rules:
        if predicate(text):
            return category
    return default


# ── Berth capability ──────────────────────────────────────────────────────────
# Category names double as BerthRecord attribute names; "general" is handled
# by BerthRecord.is_specialised in berths.py.

GENERAL_CARGO = "general"

BERTH_CAPABILITY_RULES: list[Rule] = [
    (_any("container"),                         "container"),
    (_all("liquid", "bulk"),                    "liquid_bulk"),
    (_any("liquid", "tank", "tanker", "oil"),   "liquid_bulk"),
    (_any("bulk", "ore", "iron", "coal", "grain"), "bulk"),
    (_any("roro", "ro-ro"),                     "roro"),
    (_any("pol"),                               "pol"),
    (_any("passenger", "cruise"),               "passenger_cruise"),
    (_any("bunker"),                            "bunker"),
]


def berth_capability(cargo: Optional[str]) -> str:
    """Berth flag a cargo label requires. A blank label asks for the Bulk flag."""
    if not (cargo or "").strip():
        return "bulk"
    return classify(cargo, BERTH_CAPABILITY_RULES, GENERAL_CARGO)


# ── Vessel type (port dues, berth hire, pilotage) ─────────────────────────────

VESSEL_TYPE_RULES: list[Rule] = [
    (_any("tanker", "oil", "tank"), "Tankers"),
    (_any("container"),             "Container"),
    (_any("roro", "ro-ro"),         "RoRo"),
    (_any("bulk", "ore", "iron"),   "Bulk Cargo"),
]

# Pilotage master spells two of its rate columns differently
_PILOTAGE_COLUMN = {"Bulk Cargo": "Bulk", "Others": "Other"}


def vessel_type(cargo: Optional[str]) -> str:
    return classify(cargo, VESSEL_TYPE_RULES, "Others")


def pilotage_column(cargo: Optional[str]) -> str:
    key = vessel_type(cargo)
    return _PILOTAGE_COLUMN.get(key, key)


# ── Handling throughput (tons/day) ────────────────────────────────────────────

DEFAULT_THROUGHPUT = 1000.0

THROUGHPUT_RULES: list[Rule] = [
    (_any("liquid", "oil", "diesel", "tank"), 5000.0),
    (_any("container"),                       400.0),
    (_any("cement", "clinker"),               1200.0),
    (_any("iron", "ore"),                     2500.0),
    (_any("grain", "food"),                   800.0),
]


def throughput_heuristic(cargo: Optional[str]) -> float:
    return classify(cargo, THROUGHPUT_RULES, DEFAULT_THROUGHPUT)


# ── Stevedoring ───────────────────────────────────────────────────────────────

DEFAULT_ROYALTY_TYPE = "Break Bulk except Automobiles"

ROYALTY_TYPE_RULES: list[Rule] = [
    (_any("container"),              "Container -Laden"),
    # before "bulk" so break bulk is not swallowed by the dry bulk rule
    (_any("break bulk"),             "Break Bulk except Automobiles"),
    (_any("bulk"),                   "Dry Bulk"),
    (_any("automobile", "vehicle"),  "Automobiles - Upto 4 wheelers"),
]


def royalty_cargo_type(category: Optional[str]) -> str:
    return classify(category, ROYALTY_TYPE_RULES, DEFAULT_ROYALTY_TYPE)


COMPOSITE_RULES: list[Rule] = [
    (_any("sugar", "agri"), "AGPSUBGS"),
]


def composite_cargo_code(category: Optional[str]) -> str:
    return classify(category, COMPOSITE_RULES, "ALLOTHCG")
