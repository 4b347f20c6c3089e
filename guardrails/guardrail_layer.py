"""
guardrails/guardrail_layer.py
Guardrail Layer
Checks around every calculation:
  1. InputValidator: required fields per module and mode, dimension sanity
  2. OutputValidator: tax/total consistency of a CalculationResult
"""
import math
from dataclasses import dataclass, field
from typing import Any

from config.settings import settings
from monitoring import GUARDRAIL_FAILURES, get_logger
from query_processor.models import (
    MODES,
    TRADE_TYPES,
    CargoScenario,
    RailScenario,
    ScenarioValidationError,
    StevedoreScenario,
    StorageScenario,
    VesselScenario,
)

log = get_logger(__name__)

_REL_TOL = 1e-9
_ABS_TOL = 1e-6


def _close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=_REL_TOL, abs_tol=_ABS_TOL)


@dataclass
class ValidationReport:
    passed: bool
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ── 1. Input Validator ────────────────────────────────────────────────────────

class InputValidator:

    def validate(self, module: str, scenario: Any) -> ValidationReport:
        issues: list[str] = []
        warnings: list[str] = []

        if scenario.mode not in MODES:
            issues.append(f"mode must be one of {', '.join(MODES)}")

        check = getattr(self, f"_check_{module}", None)
        if check is None:
            issues.append(f"unknown module '{module}'")
        else:
            check(scenario, issues, warnings)

        return ValidationReport(passed=not issues, issues=issues, warnings=warnings)

    @staticmethod
    def _check_trade(trade_type: str, issues: list[str]) -> None:
        if trade_type not in TRADE_TYPES:
            issues.append(f"trade_type must be Coastal or Foreign, got '{trade_type}'")

    def _check_vessel(self, s: VesselScenario, issues: list[str], warnings: list[str]) -> None:
        self._check_trade(s.trade_type, issues)
        if s.wants_cost and s.gross_tonnage <= 0:
            issues.append("gross_tonnage must be > 0")
        if s.wants_logistics:
            for name in ("loa", "draft", "beam"):
                if getattr(s, name) <= 0:
                    issues.append(f"{name} must be > 0")
        if s.quantity < 0:
            issues.append("quantity cannot be negative")

        if s.gross_tonnage > 0 and s.quantity > s.gross_tonnage:
            warnings.append("Cargo quantity exceeds vessel GT, please verify inputs")
        if s.loa > 0 and (s.draft > s.loa * 0.4 or s.beam > s.loa * 0.6):
            warnings.append("Possibly incorrect dimension values, please verify inputs")

    def _check_cargo(self, s: CargoScenario, issues: list[str], warnings: list[str]) -> None:
        self._check_trade(s.trade_type, issues)
        if s.cargo_mode == "cargo":
            if not s.cargo.strip():
                issues.append("cargo is required")
            if s.weight <= 0:
                issues.append("weight must be > 0")
        elif s.cargo_mode == "container":
            if not any(line.count > 0 for line in s.containers):
                issues.append("at least one container count must be > 0")
        else:
            issues.append("cargo_mode must be 'cargo' or 'container'")
        if s.days_after_free < 0:
            issues.append("days_after_free cannot be negative")
        if s.cargo_value < 0:
            issues.append("cargo_value cannot be negative")

    def _check_rail(self, s: RailScenario, issues: list[str], warnings: list[str]) -> None:
        if not s.cargo_type.strip():
            issues.append("cargo_type is required")
        if not s.wagon_type.strip():
            issues.append("wagon_type is required")
        if s.num_wagons <= 0:
            issues.append("num_wagons must be > 0")
        if s.operation_hours < 0:
            issues.append("operation_hours cannot be negative")
        if s.cargo_weight < 0:
            issues.append("cargo_weight cannot be negative")

    def _check_storage(self, s: StorageScenario, issues: list[str], warnings: list[str]) -> None:
        if s.cargo_mode == "cargo":
            if not s.cargo.strip() or s.weight <= 0:
                issues.append("cargo and a weight > 0 are required")
        elif s.cargo_mode == "container":
            if not any(c > 0 for c in s.container_counts.values()):
                issues.append("at least one container count must be > 0")
        else:
            issues.append("cargo_mode must be 'cargo' or 'container'")

        if s.storage_type == "immediate":
            if s.wants_cost and not s.area_type.strip():
                issues.append("area_type is required for immediate storage")
            if s.days <= 0:
                issues.append("days must be > 0 for immediate storage")
        elif s.storage_type == "lease":
            if s.wants_cost and not s.lease_type.strip():
                issues.append("lease_type is required for lease storage")
            if s.months < 0:
                issues.append("months cannot be negative")
        else:
            issues.append("storage_type must be 'immediate' or 'lease'")

    def _check_stevedore(self, s: StevedoreScenario, issues: list[str], warnings: list[str]) -> None:
        if not s.cargo.strip():
            issues.append("cargo is required")
        if not s.labour_line.strip():
            issues.append("labour_line is required")
        if s.weight <= 0:
            issues.append("weight must be > 0")
        if s.mobile_crane.strip().upper() not in ("Y", "N"):
            issues.append("mobile_crane must be Y or N")


# ── 2. Output Validator ───────────────────────────────────────────────────────

class OutputValidator:

    def validate(self, result: Any) -> ValidationReport:
        issues: list[str] = []

        for name, amount in result.charges.items():
            if not math.isfinite(amount):
                issues.append(f"{name} is not a finite amount")
            elif amount < 0:
                issues.append(f"{name} cannot be negative")

        expected_subtotal = sum(result.charges.values())
        if not _close(result.subtotal, expected_subtotal):
            issues.append(
                f"subtotal {result.subtotal:,.2f} does not equal charge sum {expected_subtotal:,.2f}"
            )
        expected_taxes = result.subtotal * settings.tax_rate
        if not _close(result.taxes, expected_taxes):
            issues.append(f"taxes should be {expected_taxes:,.2f} but got {result.taxes:,.2f}")
        if not _close(result.total, result.subtotal + result.taxes):
            issues.append("total does not equal subtotal + taxes")

        return ValidationReport(passed=not issues, issues=issues)


# ── Guardrail Orchestrator ────────────────────────────────────────────────────

class GuardrailLayer:
    """
    Runs the guardrail checks. Input failures raise; output failures are
    reported and counted.
    """

    def __init__(self) -> None:
        self._input_validator  = InputValidator()
        self._output_validator = OutputValidator()

    def validate_input(self, module: str, scenario: Any) -> ValidationReport:
        report = self._input_validator.validate(module, scenario)
        if not report.passed:
            log.warning("Input validation failed", module=module, issues=report.issues)
            GUARDRAIL_FAILURES.labels(check_type="input").inc()
            raise ScenarioValidationError(report.issues, module=module)
        return report

    def validate_output(self, result: Any) -> dict[str, Any]:
        report = self._output_validator.validate(result)
        log.info("Guardrail output check", module=result.module, passed=report.passed)
        if not report.passed:
            GUARDRAIL_FAILURES.labels(check_type="output").inc()
        return {"passed": report.passed, "issues": report.issues}
