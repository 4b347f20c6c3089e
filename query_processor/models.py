"""
query_processor/models.py
Scenario dataclasses shared by the builder, calculators, guardrails and API.
Kept in a separate module to avoid circular imports.
"""
from dataclasses import dataclass, field
from typing import Optional

LOGISTICS, COST, BOTH = "logistics", "cost", "both"
MODES = (LOGISTICS, COST, BOTH)

TRADE_TYPES = ("Coastal", "Foreign")


@dataclass(frozen=True)
class ContainerLine:
    container_class: str     # Standard | MAFI | Shipper-Own
    fill_state: str          # Empty | Laden
    size_band: str           # upto_20ft | 20_to_40ft | above_40ft
    count: int


class ScenarioValidationError(ValueError):
    """User input is missing or malformed; nothing was computed."""

    def __init__(self, issues: list[str], module: str = "") -> None:
        self.issues = list(issues)
        self.module = module
        prefix = f"{module}: " if module else ""
        super().__init__(prefix + "; ".join(self.issues))


@dataclass
class _Scenario:
    mode: str = BOTH

    @property
    def wants_logistics(self) -> bool:
        return self.mode in (LOGISTICS, BOTH)

    @property
    def wants_cost(self) -> bool:
        return self.mode in (COST, BOTH)


@dataclass
class VesselScenario(_Scenario):
    gross_tonnage: float = 0.0
    loa: float = 0.0
    draft: float = 0.0
    beam: float = 0.0
    cargo: str = ""                  # cargo description or free-text label
    quantity: float = 0.0            # tons to handle, drives stay hours
    trade_type: str = "Foreign"


@dataclass
class CargoScenario(_Scenario):
    """
    `cargo_mode` picks between bulk/break-bulk wharfage on the cargo master
    ("cargo") and per-box wharfage from the container schedule ("container").
    """
    cargo: str = ""
    weight: float = 0.0
    trade_type: str = "Foreign"
    cargo_mode: str = "cargo"
    cargo_value: float = 0.0
    days_after_free: float = 0.0
    quantity_delivered: Optional[float] = None   # defaults to weight
    containers: list[ContainerLine] = field(default_factory=list)

    # demurrage slab filters; blank means "unspecified"
    cargo_category: str = ""         # overrides the cargo master's category
    operation_type: str = ""
    storage_type: str = ""

    @property
    def demurrage_quantity(self) -> float:
        return self.weight if self.quantity_delivered is None else self.quantity_delivered


@dataclass
class RailScenario(_Scenario):
    cargo_type: str = ""             # "Container" or a bulk/general label
    wagon_type: str = ""
    num_wagons: int = 0
    operation_hours: float = 0.0
    cargo_weight: float = 0.0
    # 20ft_Container | 40ft_Container | Above 40ft_Container → boxes
    container_counts: dict[str, int] = field(default_factory=dict)

    @property
    def is_container(self) -> bool:
        return self.cargo_type == "Container"


@dataclass
class StorageScenario(_Scenario):
    storage_type: str = "immediate"  # immediate | lease
    cargo_mode: str = "cargo"        # cargo | container
    cargo: str = ""                  # SM_StowageFactor.Cargo
    weight: float = 0.0
    # upto_20ft | 20_to_40ft | above_40ft → boxes
    container_counts: dict[str, int] = field(default_factory=dict)
    area_type: str = ""              # SM_ImmediateCargoFee.S_Type
    days: int = 0
    lease_type: str = ""             # SM_LicenceFee.Description
    lease_location: Optional[str] = None
    months: int = 1


@dataclass
class StevedoreScenario(_Scenario):
    cargo: str = ""
    weight: float = 0.0
    labour_line: str = ""            # LM_labourDatumMaster.LINE_NO
    mobile_crane: str = "N"          # 100-ton mobile crane in use, Y | N
    shift: str = "Full"
    royalty_type: Optional[str] = None
