"""
calculation_engine/calculators.py
Module Calculators: one per SPLS module (vessel, cargo, rail, storage, stevedore).

Each calculator validates its scenario, runs only the lookups the scenario's
mode asks for, and folds the named charges into subtotal / 18% tax / total.
A lookup that finds no rate contributes zero and leaves a warning behind.
"""
from typing import Any, Optional

from calculation_engine import cargo_charges, rail_charges, stevedoring, storage_charges, vessel_charges
from calculation_engine.berths import find_eligible_berths
from calculation_engine.classifier import composite_cargo_code, royalty_cargo_type
from calculation_engine.currency import CurrencyNormalizer, get_currency_normalizer
from calculation_engine.lookup_utils import FOREIGN
from calculation_engine.results import CalculationResult
from config.settings import settings
from guardrails.guardrail_layer import GuardrailLayer
from knowledge_base.table_store import TableStore, get_table_store
from knowledge_base.tables import RateTables
from monitoring import get_logger
from query_processor.models import (
    CargoScenario,
    RailScenario,
    ScenarioValidationError,
    StevedoreScenario,
    StorageScenario,
    VesselScenario,
)

log = get_logger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Shared base class
# ─────────────────────────────────────────────────────────────────────────────
class _Base:
    """Shared base: validation, miss handling and finalisation."""

    MODULE = ""

    def __init__(
        self,
        store: Optional[TableStore] = None,
        currency: Optional[CurrencyNormalizer] = None,
        guardrails: Optional[GuardrailLayer] = None,
    ) -> None:
        self.store      = store or get_table_store()
        self._currency  = currency
        self.guardrails = guardrails or GuardrailLayer()

    @property
    def tables(self) -> RateTables:
        return self.store.tables

    @property
    def currency(self) -> CurrencyNormalizer:
        return self._currency or get_currency_normalizer()

    def calculate(self, scenario: Any) -> CalculationResult:
        report = self.guardrails.validate_input(self.MODULE, scenario)
        result = CalculationResult(module=self.MODULE, mode=scenario.mode)
        result.warnings.extend(report.warnings)
        self._compute(scenario, result)
        return self._finalise(result)

    def _compute(self, scenario: Any, result: CalculationResult) -> None:
        raise NotImplementedError

    def _charge(
        self,
        result: CalculationResult,
        name: str,
        amount: Optional[float],
        item: str = "",
        miss: str = "",
    ) -> float:
        """Record a named charge; a None amount is a miss and counts as zero."""
        if amount is None:
            result.warnings.append(miss or f"No rate found for {name.replace('_', ' ')}; charged as 0")
            amount = 0.0
        result.charges[name] = amount
        result.breakdown.append({"item": item or name, "amount": round(amount, 2)})
        return amount

    def _finalise(self, result: CalculationResult) -> CalculationResult:
        # unrounded; presentation layers round to paise
        result.subtotal = sum(result.charges.values())
        result.taxes    = result.subtotal * settings.tax_rate
        result.total    = result.subtotal + result.taxes
        result.metadata.setdefault("tax_rate", settings.tax_rate)
        return result

    def _inr_per_usd(self, result: CalculationResult) -> float:
        rate = self.currency.resolve()
        result.metadata["inr_per_usd"] = rate
        result.metadata["exchange_rate_source"] = self.currency.source
        return rate


# ─────────────────────────────────────────────────────────────────────────────
# 1. VESSEL: berths, stay hours, port dues, pilotage, berth hire
# ─────────────────────────────────────────────────────────────────────────────
class VesselCalculator(_Base):
    MODULE = "vessel"

    def _compute(self, s: VesselScenario, result: CalculationResult) -> None:
        t = self.tables
        cargo_record = t.find_cargo(s.cargo)
        label = s.cargo
        hours = vessel_charges.estimate_stay_hours(s.quantity, label, cargo_record)

        if s.wants_logistics:
            groups = find_eligible_berths(t.berths, s.loa, s.draft, s.beam, label)
            result.logistics["eligible_berths"] = [
                {"dock": g.dock_name, "berths": g.berths} for g in groups
            ]
            result.logistics["stay_hours"] = hours
            result.logistics["throughput_tons_per_day"] = vessel_charges.cargo_throughput(cargo_record, label)
            if not groups:
                result.warnings.append("No eligible berths for these vessel dimensions and cargo")

        if not s.wants_cost:
            return

        inr = self._inr_per_usd(result) if s.trade_type == FOREIGN else 1.0
        gt = s.gross_tonnage
        self._charge(
            result, "port_dues",
            vessel_charges.port_dues(t.port_dues, gt, s.trade_type, label, inr),
            item=f"Port dues: {gt:,.0f} GT ({s.trade_type})",
        )
        self._charge(
            result, "pilotage",
            vessel_charges.pilotage(t.pilotage, gt, s.trade_type, label, inr),
            item=f"Pilotage: {gt:,.0f} GT ({s.trade_type})",
        )
        self._charge(
            result, "berth_hire",
            vessel_charges.berth_hire(t.berth_hire, hours, gt, s.trade_type, label, inr),
            item=f"Berth hire: {gt:,.0f} GT × {hours} h",
        )
        result.metadata["stay_hours"] = hours


# ─────────────────────────────────────────────────────────────────────────────
# 2. CARGO: wharfage and demurrage
# ─────────────────────────────────────────────────────────────────────────────
class CargoCalculator(_Base):
    MODULE = "cargo"

    def _compute(self, s: CargoScenario, result: CalculationResult) -> None:
        if not s.wants_cost:
            return
        t = self.tables
        cargo_record = t.find_cargo(s.cargo)
        if s.cargo_mode == "cargo" and cargo_record is None:
            result.warnings.append(f"Cargo '{s.cargo}' not found in cargo master")

        if s.cargo_mode == "container":
            amount = cargo_charges.container_wharfage(s.containers, s.trade_type, s.cargo_value)
            boxes = sum(line.count for line in s.containers)
            self._charge(result, "wharfage", amount, item=f"Container wharfage: {boxes} boxes")
        else:
            self._charge(
                result, "wharfage",
                cargo_charges.cargo_wharfage(
                    cargo_record, t.wharfage_rates, s.weight, s.cargo_value, s.trade_type,
                ),
                item=f"Wharfage: {s.weight:,.2f} t ({s.trade_type})",
                miss=f"No wharfage rate for '{s.cargo}'; wharfage charged as 0",
            )

        self._charge(
            result, "demurrage", self._demurrage(s, cargo_record, result),
            item=f"Demurrage: {s.days_after_free:g} days after free period",
        )

    def _demurrage(self, s: CargoScenario, cargo_record, result: CalculationResult) -> float:
        days, qty = s.days_after_free, s.demurrage_quantity
        if days <= 0 or qty <= 0:
            return 0.0

        category = s.cargo_category or (cargo_record.category_name if cargo_record else "") or s.cargo
        slabs = self.tables.demurrage_slabs
        inr = self._inr_per_usd(result) if any(sl.rate_currency == "USD" for sl in slabs) else 1.0
        amount = cargo_charges.slab_demurrage(
            slabs, days, qty, inr,
            cargo_category=category, operation_type=s.operation_type,
            trade_type=s.trade_type, storage_type=s.storage_type,
        )
        if amount is not None:
            return amount

        flat_rate = cargo_record.demurrage_rate_per_day if cargo_record else None
        if flat_rate and flat_rate > 0:
            result.metadata["demurrage_basis"] = "cargo master flat rate"
            return cargo_charges.flat_demurrage(flat_rate, days, qty)

        result.warnings.append("No demurrage slab or rate found; demurrage charged as 0")
        return 0.0


# ─────────────────────────────────────────────────────────────────────────────
# 3. RAIL: siding plan, haulage, terminal handling, wagon demurrage
# ─────────────────────────────────────────────────────────────────────────────
class RailCalculator(_Base):
    MODULE = "rail"

    def _compute(self, s: RailScenario, result: CalculationResult) -> None:
        t = self.tables
        wagon = next((w for w in t.wagons if w.wagon_type == s.wagon_type), None)
        if wagon is None:
            raise ScenarioValidationError(
                [f"wagon_type '{s.wagon_type}' not found in wagon master"], module=self.MODULE,
            )

        if s.wants_logistics:
            plan = rail_charges.select_siding(t.sidings, wagon, s.num_wagons)
            result.logistics.update(vars(plan))

        if not s.wants_cost:
            return

        if s.is_container:
            haulage = rail_charges.container_haulage(t.haulage, s.container_counts)
            boxes = sum(s.container_counts.values())
            self._charge(
                result, "haulage", haulage.amount if haulage else None,
                item=f"Haulage: {boxes} containers",
            )
            if haulage and haulage.missed:
                result.warnings.append(
                    f"No haulage rate for {', '.join(haulage.missed)}; those containers charged as 0"
                )
        else:
            self._charge(
                result, "haulage", rail_charges.bulk_haulage(t.haulage, s.cargo_weight),
                item=f"Haulage: {s.cargo_weight:,.2f} t",
            )
        self._charge(
            result, "terminal_handling",
            rail_charges.terminal_handling(t.terminal_handling, s.cargo_weight, s.is_container),
            item=f"Terminal handling: {s.cargo_weight:,.2f} t",
        )

        dem = rail_charges.rail_demurrage(
            t.rail_demurrage, s.operation_hours, wagon.free_hours, s.num_wagons,
        )
        self._charge(
            result, "demurrage", dem.amount,
            item=f"Demurrage: {dem.chargeable_hours:g} h × {s.num_wagons} wagons",
        )
        result.logistics.update({
            "free_hours": wagon.free_hours,
            "chargeable_hours": dem.chargeable_hours,
            "demurrage_rate": dem.rate,
        })


# ─────────────────────────────────────────────────────────────────────────────
# 4. STORAGE: required area, immediate or lease charges
# ─────────────────────────────────────────────────────────────────────────────
class StorageCalculator(_Base):
    MODULE = "storage"

    def _compute(self, s: StorageScenario, result: CalculationResult) -> None:
        t = self.tables
        if s.cargo_mode == "container":
            area = storage_charges.container_area(t.stowage_factors, s.container_counts)
            stowage = None
        else:
            area = storage_charges.cargo_area(t.stowage_factors, s.cargo, s.weight)
            stowage = storage_charges.find_stowage(t.stowage_factors, s.cargo)
        if area <= 0:
            raise ScenarioValidationError(
                ["could not determine a storage area from the cargo/container details"],
                module=self.MODULE,
            )

        if s.wants_logistics:
            result.logistics.update({
                "required_area_sqm": round(area, 2),
                "storage_type": s.storage_type,
                "suggested_storage": s.area_type if s.storage_type == "immediate" else s.lease_type,
                "stowage_factor": stowage.stowage_factor if stowage else None,
                "density": stowage.density if stowage else None,
            })

        if not s.wants_cost:
            return

        if s.storage_type == "immediate":
            charge = storage_charges.immediate_storage(t.immediate_storage, area, s.area_type, s.days)
            item = f"Immediate storage: {area:,.2f} m² for {s.days} days"
            if charge:
                result.metadata.update({"periods": charge.periods, "rate_per_15_days": charge.rate})
        else:
            lease = storage_charges.find_lease(t.leases, s.lease_type, s.lease_location)
            charge = storage_charges.lease_storage(lease, area, s.months)
            item = f"Lease: {area:,.2f} m² for {s.months or 1} months"
            if charge:
                result.metadata.update({
                    "months": charge.months, "rate_per_month": charge.rate,
                    "unit_of_measure": lease.unit_of_measure,
                })
        self._charge(
            result, "storage", charge.amount if charge else None, item=item,
            miss=f"No {s.storage_type} storage rate found; storage charged as 0",
        )


# ─────────────────────────────────────────────────────────────────────────────
# 5. STEVEDORE: gangs, work days, composite labour, royalty
# ─────────────────────────────────────────────────────────────────────────────
class StevedoreCalculator(_Base):
    MODULE = "stevedore"

    def _compute(self, s: StevedoreScenario, result: CalculationResult) -> None:
        t = self.tables
        datum = stevedoring.find_datum(t.labour_datum, s.labour_line, s.mobile_crane)
        if datum is None:
            raise ScenarioValidationError(
                [f"no datum found for labour line '{s.labour_line}' (crane {s.mobile_crane})"],
                module=self.MODULE,
            )
        cargo_record = t.find_cargo(s.cargo)
        category = cargo_record.category_name if cargo_record else s.cargo

        gangs = stevedoring.gangs_required(s.weight, datum.datum_per_crane)
        norm = stevedoring.cargo_norm(cargo_record)
        if s.wants_logistics:
            result.logistics.update({
                "gangs_required": gangs,
                "work_days": stevedoring.work_days(s.weight, norm),
                "datum_per_crane": datum.datum_per_crane,
                "cargo_norm": norm,
            })

        if not s.wants_cost:
            return

        code = composite_cargo_code(category)
        self._charge(
            result, "composite_labour",
            stevedoring.composite_cost(
                t.labour_manning, t.composite_rates, s.labour_line, s.shift, code, gangs,
            ),
            item=f"Composite labour: {gangs} gangs ({s.shift} shift, {code})",
            miss=f"Manning data incomplete for line '{s.labour_line}'; composite labour charged as 0",
        )

        royalty_type = s.royalty_type or royalty_cargo_type(category)
        royalty = stevedoring.royalty(t.royalties, s.weight, royalty_type)
        miss = f"No royalty rate for '{royalty_type}'; royalty charged as 0"
        self._charge(
            result, "stevedoring_royalty", royalty.stevedoring if royalty else None,
            item=f"Stevedoring royalty: {royalty_type}", miss=miss,
        )
        self._charge(
            result, "shore_handling_royalty", royalty.shore_handling if royalty else None,
            item=f"Shore handling royalty: {royalty_type}", miss=miss,
        )
        result.metadata.update({"royalty_type": royalty_type, "composite_cargo_code": code})
