"""
knowledge_base/records.py
Typed rate-table records.

Every table row arrives as a flat mapping of column name → string (CSV) or
scalar (SQLite). The ``from_row`` constructors below are the only place that
knows the source column names; they are matched verbatim, including case and
spacing ("BOX TYPE", "100_tons_Mobile_Crane", "LINE NO").  Numeric cells are
parsed leniently: blanks and junk become ``None`` and each record applies the
default the estimator has always used for that column.
"""
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

_YES = {"yes", "y", "true", "1"}
_WILDCARDS = {"both", "any", ""}


def to_number(value: Any) -> Optional[float]:
    """Parse a table cell as a float; blank or unparseable cells return None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        num = float(text)
    except ValueError:
        return None
    return None if math.isnan(num) else num


def to_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def is_yes(value: Any) -> bool:
    if value is None:
        return False
    return str(value).strip().lower() in _YES


def is_wildcard(value: str) -> bool:
    return value.strip().lower() in _WILDCARDS


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        val = row.get(key)
        if val is not None and to_text(val) != "":
            return val
    return None


def _or_default(value: Optional[float], default: float) -> float:
    # Mirrors `parseFloat(x) || default`: zero and blanks both take the default
    return value if value else default


# ─────────────────────────────────────────────────────────────────────────────
# Cargo / wharfage / demurrage
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CargoRecord:
    description: str
    category_name: str
    sor_code: str
    discharge_rate_per_day: Optional[float]
    load_rate_per_day: Optional[float]
    demurrage_rate_per_day: Optional[float]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CargoRecord":
        return cls(
            description=to_text(_first(row, "CargoDescription", "Cargo Description")),
            category_name=to_text(_first(row, "CargoCategoryName", "Cargo Category Name")),
            sor_code=to_text(row.get("SoRNoCode")),
            discharge_rate_per_day=to_number(row.get("DSCHRG_RATE_PR_DAY")),
            load_rate_per_day=to_number(row.get("LD_RATE_PR_DAY")),
            demurrage_rate_per_day=to_number(
                _first(row, "DEMURRAGE_RATE_PR_DAY", "DEMURRAGE_RATE", "demurrage_rate")
            ),
        )


@dataclass(frozen=True)
class WharfageRateRecord:
    sor_code: str
    cost_basis: str          # Weight | Value | Unit
    coastal_rate: Optional[float]
    foreign_rate: Optional[float]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "WharfageRateRecord":
        basis = to_text(_first(row, "cost_basis", "Cost_Basis", "Cost Basis")) or "Weight"
        return cls(
            sor_code=to_text(_first(row, "sor_item", "SoRNoCode")),
            cost_basis=basis.title(),
            coastal_rate=to_number(row.get("coastal_rate")),
            foreign_rate=to_number(row.get("foreign_rate")),
        )

    def rate_for(self, trade_type: str) -> Optional[float]:
        return self.coastal_rate if trade_type == "Coastal" else self.foreign_rate


@dataclass(frozen=True)
class DemurrageSlabRecord:
    cargo_category: str
    operation_type: str
    trade_type: str
    storage_type: str
    start_day: int
    end_day: int
    rate: float
    rate_currency: str       # INR | USD

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DemurrageSlabRecord":
        start = int(to_number(row.get("Start_Day")) or 0)
        end = to_number(row.get("End_Day"))
        return cls(
            cargo_category=to_text(row.get("Cargo_Category")),
            operation_type=to_text(row.get("Operation_Type")),
            trade_type=to_text(row.get("Trade_Type")),
            storage_type=to_text(row.get("Storage_Type")),
            start_day=start,
            end_day=int(end) if end is not None else start,
            rate=to_number(row.get("Rate")) or 0.0,
            rate_currency=(to_text(row.get("Rate_Currency")) or "INR").upper(),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Vessel
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BerthRecord:
    name: str
    dock_name: str
    quay_length: float
    draft: float
    beam: float
    container: bool
    liquid_bulk: bool
    bulk: bool
    roro: bool
    pol: bool
    passenger_cruise: bool
    bunker: bool

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BerthRecord":
        return cls(
            name=to_text(row.get("BerthName")),
            dock_name=to_text(row.get("Dock_Name")),
            quay_length=to_number(row.get("Quay_Len")) or 0.0,
            draft=to_number(row.get("Draft")) or 0.0,
            beam=_or_default(to_number(row.get("Beam")), 999.0),
            container=is_yes(row.get("Container")),
            liquid_bulk=is_yes(row.get("Liquid_Bulk")),
            bulk=is_yes(row.get("Bulk")),
            roro=is_yes(row.get("RORO")),
            pol=is_yes(row.get("POL")),
            passenger_cruise=is_yes(row.get("PassnCruise")),
            bunker=is_yes(row.get("Bunker")),
        )

    @property
    def is_specialised(self) -> bool:
        return (self.container or self.liquid_bulk or self.roro
                or self.pol or self.passenger_cruise or self.bunker)


@dataclass(frozen=True)
class VesselRateRecord:
    """Row of VM_port_dues or VM_berth_hire."""
    vessel_type: str
    coastal_rate: Optional[float]
    foreign_rate: Optional[float]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "VesselRateRecord":
        return cls(
            vessel_type=to_text(row.get("vessel_type")),
            coastal_rate=to_number(row.get("coastal_rate")),
            foreign_rate=to_number(row.get("foreign_rate")),
        )

    def rate_for(self, trade_type: str) -> Optional[float]:
        return self.coastal_rate if trade_type == "Coastal" else self.foreign_rate


@dataclass(frozen=True)
class PilotageRecord:
    gt_min: float
    gt_max: float
    category: str
    rates: Mapping[str, Optional[float]]    # Tankers | Container | RoRo | Bulk | Other

    COLUMNS = ("Tankers", "Container", "RoRo", "Bulk", "Other")

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PilotageRecord":
        gt_max = to_number(row.get("GT_Max"))
        return cls(
            gt_min=to_number(row.get("GT_Min")) or 0.0,
            gt_max=gt_max if gt_max else math.inf,
            category=to_text(row.get("Category")),
            rates={col: to_number(row[col]) for col in cls.COLUMNS if col in row},
        )


@dataclass(frozen=True)
class ExchangeRateRecord:
    inr: Optional[float]
    usd: Optional[float]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ExchangeRateRecord":
        keys = {str(k).strip().lower(): k for k in row if k}
        inr_key = next((keys[k] for k in ("inr", "indian rupee", "rs", "rupee") if k in keys), None)
        usd_key = next((keys[k] for k in ("usd", "dollar") if k in keys), None)
        return cls(
            inr=to_number(row[inr_key]) if inr_key else None,
            usd=to_number(row[usd_key]) if usd_key else None,
        )

    def inr_per_usd(self) -> Optional[float]:
        """
        The USD cell holds either INR-per-USD (> 1) or USD-per-INR (≤ 1,
        inverted). The INR cell is only trusted when it is itself > 1.
        """
        if self.usd is not None:
            if self.usd > 1:
                return self.usd
            if self.usd > 0:
                return 1 / self.usd
        if self.inr is not None and self.inr > 1:
            return self.inr
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Rail
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WagonRecord:
    wagon_type: str
    rake_size: int
    wagon_group: str
    free_hours: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "WagonRecord":
        return cls(
            wagon_type=to_text(row.get("wagon_type")),
            rake_size=int(to_number(row.get("Rake_Size")) or 0),
            wagon_group=to_text(row.get("Wagon_Group")),
            free_hours=_or_default(to_number(row.get("Free_Hours")), 8.0),
        )


@dataclass(frozen=True)
class SidingRecord:
    box_type: str
    yard_capacity_type: str    # Full | Partial
    lines: str
    railway_yard: str
    line_type: str
    holding_capacity: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SidingRecord":
        return cls(
            box_type=to_text(row.get("BOX TYPE")),
            yard_capacity_type=to_text(row.get("YardCapType")),
            lines=to_text(row.get("Lines")),
            railway_yard=to_text(row.get("RailwayYard")),
            line_type=to_text(row.get("LineType")),
            holding_capacity=to_text(row.get("Holding Capacity")),
        )


@dataclass(frozen=True)
class HaulageRecord:
    category: str
    description: str
    rate: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "HaulageRecord":
        return cls(
            category=to_text(row.get("category")),
            description=to_text(row.get("Haulage_description")),
            rate=to_number(row.get("H_Rate")) or 0.0,
        )


@dataclass(frozen=True)
class TerminalHandlingRecord:
    cargo_type: str
    rate: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TerminalHandlingRecord":
        return cls(
            cargo_type=to_text(row.get("cargo_type")),
            rate=to_number(row.get("THC_rate")) or 0.0,
        )


@dataclass(frozen=True)
class RailDemurrageSlabRecord:
    start_hours: float
    end_hours: float
    rate: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "RailDemurrageSlabRecord":
        return cls(
            start_hours=to_number(row.get("Time_start_HRS")) or 0.0,
            end_hours=_or_default(to_number(row.get("Time_end_HRS")), 999.0),
            rate=to_number(row.get("Dem_Rate")) or 0.0,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Storage
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StowageFactorRecord:
    cargo: str
    stowage_factor: Optional[float]
    measure: Optional[float]
    density: Optional[float]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "StowageFactorRecord":
        return cls(
            cargo=to_text(row.get("Cargo")),
            stowage_factor=to_number(row.get("StowageFactor")),
            measure=to_number(row.get("Measure")),
            density=to_number(row.get("Density")),
        )


@dataclass(frozen=True)
class ImmediateStorageRateRecord:
    area_type: str
    start_day: int
    end_day: int
    rate_per_15_days: float
    rate_area: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ImmediateStorageRateRecord":
        return cls(
            area_type=to_text(row.get("S_Type")),
            start_day=int(to_number(row.get("Start_Date")) or 0),
            end_day=int(_or_default(to_number(row.get("End_Date")), 999)),
            rate_per_15_days=to_number(row.get("Rate_for_15_days")) or 0.0,
            rate_area=_or_default(to_number(row.get("Area")), 10.0),
        )


@dataclass(frozen=True)
class LeaseRecord:
    description: str
    location: str
    rate_per_month: float
    lease_area: float
    unit_of_measure: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LeaseRecord":
        return cls(
            description=to_text(row.get("Description")),
            location=to_text(row.get("Location")),
            rate_per_month=to_number(row.get("Rate_per_month")) or 0.0,
            lease_area=_or_default(to_number(row.get("Area")), 1.0),
            unit_of_measure=to_text(row.get("S_UoM")),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Stevedoring
# ─────────────────────────────────────────────────────────────────────────────

LABOUR_CATEGORIES = ("Tindal", "Winch_driver", "Signal_Man", "Mazdoor", "Maistry", "Tally_clerk")


@dataclass(frozen=True)
class LabourDatumRecord:
    line_no: str
    mobile_crane: str          # Y | N
    datum_per_crane: float
    description: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LabourDatumRecord":
        return cls(
            line_no=to_text(row.get("LINE_NO")),
            mobile_crane=to_text(row.get("100_tons_Mobile_Crane")).upper(),
            datum_per_crane=_or_default(to_number(row.get("Datum_per_Crane")), 1.0),
            description=to_text(row.get("Cargo_Type_Description")),
        )


@dataclass(frozen=True)
class LabourManningRecord:
    line_no: str
    on_board: bool
    headcount: Mapping[str, int]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LabourManningRecord":
        return cls(
            line_no=to_text(row.get("LINE NO")),
            on_board=to_text(row.get("OnBoard")).upper() == "Y",
            headcount={cat: int(to_number(row.get(cat)) or 0) for cat in LABOUR_CATEGORIES},
        )


@dataclass(frozen=True)
class CompositeRateRecord:
    labour_category: str
    shift: str
    cargo_type_code: str
    rate: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CompositeRateRecord":
        return cls(
            labour_category=to_text(row.get("Lab_Category")),
            shift=to_text(row.get("Shift")),
            cargo_type_code=to_text(row.get("Type_Cargo")),
            rate=to_number(row.get("Rate")) or 0.0,
        )


@dataclass(frozen=True)
class RoyaltyRecord:
    cargo_type: str
    stevedoring_rate: float
    shore_handling_rate: float
    unit_of_measure: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "RoyaltyRecord":
        return cls(
            cargo_type=to_text(row.get("RltyCargo_Type")),
            stevedoring_rate=to_number(row.get("Stevedoring_Royalty")) or 0.0,
            # column name carries the source spelling
            shore_handling_rate=to_number(row.get("ShoreHanding_Royalty")) or 0.0,
            unit_of_measure=to_text(row.get("UOM")) or "ton",
        )
