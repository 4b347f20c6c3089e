"""
calculation_engine/results.py
Breakdown returned by every module calculator.
"""
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class CalculationResult:
    module: str
    mode: str
    charges: dict[str, float] = field(default_factory=dict)
    subtotal: float = 0.0
    taxes: float = 0.0
    total: float = 0.0
    logistics: dict[str, Any] = field(default_factory=dict)
    breakdown: list[dict] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
