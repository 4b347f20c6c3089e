"""
knowledge_base/tables.py
The in-memory bundle of typed rate tables handed to the calculators.
"""
from dataclasses import dataclass, field, fields
from typing import Any, Iterable, Mapping

from knowledge_base.records import (
    BerthRecord,
    CargoRecord,
    CompositeRateRecord,
    DemurrageSlabRecord,
    ExchangeRateRecord,
    HaulageRecord,
    ImmediateStorageRateRecord,
    LabourDatumRecord,
    LabourManningRecord,
    LeaseRecord,
    PilotageRecord,
    RailDemurrageSlabRecord,
    RoyaltyRecord,
    SidingRecord,
    StowageFactorRecord,
    TerminalHandlingRecord,
    VesselRateRecord,
    WagonRecord,
    WharfageRateRecord,
)

# attribute → (source table name, record type)
TABLE_SCHEMA = {
    "cargo_master":       ("CM_CargoMaster",                   CargoRecord),
    "wharfage_rates":     ("CM_WharfageMaster",                WharfageRateRecord),
    "demurrage_slabs":    ("CM_DemurrageSlabs",                DemurrageSlabRecord),
    "berths":             ("VM_berth_master",                  BerthRecord),
    "port_dues":          ("VM_port_dues",                     VesselRateRecord),
    "berth_hire":         ("VM_berth_hire",                    VesselRateRecord),
    "pilotage":           ("VM_Pilotage_Master_with_Category", PilotageRecord),
    "exchange_rates":     ("VM_currency_lookup",               ExchangeRateRecord),
    "wagons":             ("RM_WagonMaster",                   WagonRecord),
    "sidings":            ("RM_RailwaySidingMaster",           SidingRecord),
    "haulage":            ("RM_Haulage",                       HaulageRecord),
    "terminal_handling":  ("RM_TerminalHandling",              TerminalHandlingRecord),
    "rail_demurrage":     ("RM_Demurrage",                     RailDemurrageSlabRecord),
    "stowage_factors":    ("SM_StowageFactor",                 StowageFactorRecord),
    "immediate_storage":  ("SM_ImmediateCargoFee",             ImmediateStorageRateRecord),
    "leases":             ("SM_LicenceFee",                    LeaseRecord),
    "labour_datum":       ("LM_labourDatumMaster",             LabourDatumRecord),
    "labour_manning":     ("LM_labourManningMaster",           LabourManningRecord),
    "composite_rates":    ("LM_CompositeRate",                 CompositeRateRecord),
    "royalties":          ("LM_RoyaltyMaster",                 RoyaltyRecord),
}

TABLE_NAMES = [name for name, _ in TABLE_SCHEMA.values()]


@dataclass(frozen=True)
class RateTables:
    cargo_master:      tuple = field(default_factory=tuple)
    wharfage_rates:    tuple = field(default_factory=tuple)
    demurrage_slabs:   tuple = field(default_factory=tuple)
    berths:            tuple = field(default_factory=tuple)
    port_dues:         tuple = field(default_factory=tuple)
    berth_hire:        tuple = field(default_factory=tuple)
    pilotage:          tuple = field(default_factory=tuple)
    exchange_rates:    tuple = field(default_factory=tuple)
    wagons:            tuple = field(default_factory=tuple)
    sidings:           tuple = field(default_factory=tuple)
    haulage:           tuple = field(default_factory=tuple)
    terminal_handling: tuple = field(default_factory=tuple)
    rail_demurrage:    tuple = field(default_factory=tuple)
    stowage_factors:   tuple = field(default_factory=tuple)
    immediate_storage: tuple = field(default_factory=tuple)
    leases:            tuple = field(default_factory=tuple)
    labour_datum:      tuple = field(default_factory=tuple)
    labour_manning:    tuple = field(default_factory=tuple)
    composite_rates:   tuple = field(default_factory=tuple)
    royalties:         tuple = field(default_factory=tuple)

    @classmethod
    def from_rows(cls, raw: Mapping[str, Iterable[Mapping[str, Any]]]) -> "RateTables":
        """
        Build typed tables from raw rows keyed by source table name
        (e.g. {"VM_berth_master": [{"BerthName": ...}, ...]}).
        Absent tables become empty.
        """
        kwargs = {}
        for attr, (table_name, record_type) in TABLE_SCHEMA.items():
            rows = raw.get(table_name) or ()
            kwargs[attr] = tuple(record_type.from_row(r) for r in rows)
        return cls(**kwargs)

    def counts(self) -> dict[str, int]:
        return {TABLE_SCHEMA[f.name][0]: len(getattr(self, f.name)) for f in fields(self)}

    def find_cargo(self, description: str):
        """Exact (case-insensitive) match on CargoDescription, None if unknown."""
        wanted = (description or "").strip().lower()
        if not wanted:
            return None
        return next((c for c in self.cargo_master if c.description.lower() == wanted), None)
