"""
calculation_engine/engine.py
Dispatches a scenario to its module calculator and checks the result.
"""
import time
from typing import Any, Optional

from calculation_engine.calculators import (
    CargoCalculator,
    RailCalculator,
    StevedoreCalculator,
    StorageCalculator,
    VesselCalculator,
)
from calculation_engine.currency import CurrencyNormalizer
from calculation_engine.results import CalculationResult
from guardrails.guardrail_layer import GuardrailLayer
from knowledge_base.table_store import TableStore, get_table_store
from monitoring import CALC_LATENCY, CALC_REQUESTS, get_logger
from query_processor.models import ScenarioValidationError

log = get_logger(__name__)


class CalculationEngine:
    """
    Orchestrates a single module calculation.
    Each calculator is independent, stateless, and directly testable.
    """

    _CALCULATOR_MAP: dict[str, type] = {
        "vessel":    VesselCalculator,
        "cargo":     CargoCalculator,
        "rail":      RailCalculator,
        "storage":   StorageCalculator,
        "stevedore": StevedoreCalculator,
    }

    def __init__(
        self,
        store: Optional[TableStore] = None,
        currency: Optional[CurrencyNormalizer] = None,
    ) -> None:
        self._store      = store or get_table_store()
        self._guardrails = GuardrailLayer()
        self._calculators = {
            name: cls(self._store, currency, self._guardrails)
            for name, cls in self._CALCULATOR_MAP.items()
        }

    @property
    def modules(self) -> list[str]:
        return list(self._calculators)

    @property
    def store(self) -> TableStore:
        return self._store

    def calculate(self, module: str, scenario: Any) -> CalculationResult:
        """
        Run one module calculation.

        Args:
            module:   vessel | cargo | rail | storage | stevedore
            scenario: the matching scenario dataclass

        Raises:
            ScenarioValidationError: the scenario is incomplete or malformed.
        """
        calculator = self._calculators.get(module)
        if calculator is None:
            raise ScenarioValidationError([f"no calculator registered for module '{module}'"])

        log.info("Starting calculation", module=module, mode=scenario.mode)
        t0 = time.perf_counter()
        try:
            result = calculator.calculate(scenario)
        except ScenarioValidationError:
            CALC_REQUESTS.labels(module=module, status="invalid").inc()
            raise
        except Exception as exc:
            CALC_REQUESTS.labels(module=module, status="error").inc()
            log.error("Calculation failed", module=module, error=str(exc))
            raise
        finally:
            CALC_LATENCY.labels(module=module).observe(time.perf_counter() - t0)

        check = self._guardrails.validate_output(result)
        result.metadata["guardrails"] = check
        result.metadata["modules_available"] = self.modules
        CALC_REQUESTS.labels(module=module, status="success").inc()

        log.info(
            "Calculation complete",
            module=module,
            subtotal=result.subtotal,
            taxes=result.taxes,
            total=result.total,
            warnings=len(result.warnings),
        )
        return result
