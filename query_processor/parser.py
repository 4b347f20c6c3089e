"""
query_processor/parser.py
Scenario builder.

Turns raw form values (strings, blanks, numbers) into typed scenarios.
Blank numeric fields take their default; anything that is present but not a
number is rejected with ScenarioValidationError listing every bad field.
"""
import math
from typing import Any, Optional

from monitoring import get_logger
from query_processor.models import (
    CargoScenario,
    ContainerLine,
    RailScenario,
    ScenarioValidationError,
    StevedoreScenario,
    StorageScenario,
    VesselScenario,
)

log = get_logger(__name__)

TRADE_ALIASES: dict[str, str] = {
    "coastal": "Coastal", "domestic": "Coastal",
    "foreign": "Foreign", "international": "Foreign", "overseas": "Foreign",
}


class ScenarioBuilder:
    """
    Builds one scenario per module from a flat dict of raw values.
    Unknown keys are ignored.
    """

    def build(self, module: str, data: dict[str, Any]) -> Any:
        method = getattr(self, f"_build_{module}", None)
        if method is None:
            raise ScenarioValidationError([f"unknown module '{module}'"])
        reader = _Reader(data)
        scenario = method(reader)
        if reader.errors:
            raise ScenarioValidationError(reader.errors, module=module)
        log.debug("Scenario built", module=module, mode=scenario.mode)
        return scenario

    def _build_vessel(self, r: "_Reader") -> VesselScenario:
        return VesselScenario(
            mode          =r.mode(),
            gross_tonnage =r.number("gross_tonnage"),
            loa           =r.number("loa"),
            draft         =r.number("draft"),
            beam          =r.number("beam"),
            cargo         =r.text("cargo"),
            quantity      =r.number("quantity"),
            trade_type    =r.trade_type(),
        )

    def _build_cargo(self, r: "_Reader") -> CargoScenario:
        weight = r.number("weight")
        delivered = r.number("quantity_delivered", default=None)
        return CargoScenario(
            mode              =r.mode(default="cost"),
            cargo             =r.text("cargo"),
            weight            =weight,
            trade_type        =r.trade_type(),
            cargo_mode        =r.text("cargo_mode", "cargo").lower(),
            cargo_value       =r.number("cargo_value"),
            days_after_free   =r.number("days_after_free"),
            quantity_delivered=delivered or None,
            containers        =r.containers(),
            cargo_category    =r.text("cargo_category"),
            operation_type    =r.text("operation_type"),
            storage_type      =r.text("storage_type"),
        )

    def _build_rail(self, r: "_Reader") -> RailScenario:
        return RailScenario(
            mode            =r.mode(),
            cargo_type      =r.text("cargo_type"),
            wagon_type      =r.text("wagon_type"),
            num_wagons      =r.integer("num_wagons"),
            operation_hours =r.number("operation_hours"),
            cargo_weight    =r.number("cargo_weight"),
            container_counts=r.counts("container_counts"),
        )

    def _build_storage(self, r: "_Reader") -> StorageScenario:
        return StorageScenario(
            mode            =r.mode(),
            storage_type    =r.text("storage_type", "immediate").lower(),
            cargo_mode      =r.text("cargo_mode", "cargo").lower(),
            cargo           =r.text("cargo"),
            weight          =r.number("weight"),
            container_counts=r.counts("container_counts"),
            area_type       =r.text("area_type"),
            days            =r.integer("days"),
            lease_type      =r.text("lease_type"),
            lease_location  =r.text("lease_location") or None,
            months          =r.integer("months", default=1) or 1,
        )

    def _build_stevedore(self, r: "_Reader") -> StevedoreScenario:
        return StevedoreScenario(
            mode          =r.mode(),
            cargo         =r.text("cargo"),
            weight        =r.number("weight"),
            labour_line   =r.text("labour_line"),
            mobile_crane  =r.text("mobile_crane", "N").upper(),
            shift         =r.text("shift", "Full"),
            royalty_type  =r.text("royalty_type") or None,
        )


class _Reader:
    """Typed access to a raw dict that collects errors instead of raising."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.data = data or {}
        self.errors: list[str] = []

    def _raw(self, key: str) -> Any:
        val = self.data.get(key)
        if isinstance(val, str):
            val = val.strip()
        return None if val in (None, "") else val

    def text(self, key: str, default: str = "") -> str:
        val = self._raw(key)
        return default if val is None else str(val).strip()

    def number(self, key: str, default: Optional[float] = 0.0) -> Optional[float]:
        val = self._raw(key)
        if val is None:
            return default
        if isinstance(val, bool):
            self.errors.append(f"{key} must be a number")
            return default
        try:
            num = float(str(val).replace(",", ""))
        except ValueError:
            self.errors.append(f"{key} must be a number, got '{val}'")
            return default
        if not math.isfinite(num):
            self.errors.append(f"{key} must be a finite number, got '{val}'")
            return default
        return num

    def integer(self, key: str, default: int = 0) -> int:
        num = self.number(key, default=None)
        if num is None:
            return default
        if num != int(num):
            self.errors.append(f"{key} must be a whole number, got '{self._raw(key)}'")
            return default
        return int(num)

    def mode(self, default: str = "both") -> str:
        return self.text("mode", default).lower()

    def trade_type(self) -> str:
        raw = self.text("trade_type", "Foreign")
        return TRADE_ALIASES.get(raw.lower(), raw)

    def counts(self, key: str) -> dict[str, int]:
        raw = self.data.get(key) or {}
        if not isinstance(raw, dict):
            self.errors.append(f"{key} must be a mapping of category to count")
            return {}
        counts: dict[str, int] = {}
        for category, value in raw.items():
            sub = _Reader({category: value})
            n = sub.integer(category)
            self.errors.extend(f"{key}.{e}" for e in sub.errors)
            if n < 0:
                self.errors.append(f"{key}.{category} cannot be negative")
            counts[category] = n
        return counts

    def containers(self) -> list[ContainerLine]:
        lines = []
        for i, item in enumerate(self.data.get("containers") or []):
            sub = _Reader(item)
            line = ContainerLine(
                container_class=sub.text("container_class", "Standard"),
                fill_state=sub.text("fill_state", "Laden"),
                size_band=sub.text("size_band", "upto_20ft"),
                count=sub.integer("count"),
            )
            self.errors.extend(f"containers[{i}].{e}" for e in sub.errors)
            if line.count < 0:
                self.errors.append(f"containers[{i}].count cannot be negative")
            lines.append(line)
        return lines
