"""
api/models.py
Pydantic request/response models, one request body per module.
"""
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Mode      = Literal["logistics", "cost", "both"]
# aliases such as "domestic" are normalised by the scenario builder
TradeType = str


class _Request(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)


class VesselRequest(_Request):
    mode:          Mode      = "both"
    gross_tonnage: float     = Field(default=0, ge=0, description="Gross tonnage (GT)")
    loa:           float     = Field(default=0, ge=0, description="Length overall in metres")
    draft:         float     = Field(default=0, ge=0)
    beam:          float     = Field(default=0, ge=0)
    cargo:         str       = Field(default="", description="Cargo description or free-text label")
    quantity:      float     = Field(default=0, ge=0, description="Tons to handle")
    trade_type:    TradeType = "Foreign"


class ContainerLineModel(_Request):
    container_class: Literal["Standard", "MAFI", "Shipper-Own"] = "Standard"
    fill_state:      Literal["Empty", "Laden"]                  = "Laden"
    size_band:       Literal["upto_20ft", "20_to_40ft", "above_40ft"] = "upto_20ft"
    count:           int = Field(default=0, ge=0)


class CargoRequest(_Request):
    mode:               Mode      = "cost"
    cargo:              str       = ""
    weight:             float     = Field(default=0, ge=0)
    trade_type:         TradeType = "Foreign"
    cargo_mode:         Literal["cargo", "container"] = "cargo"
    cargo_value:        float     = Field(default=0, ge=0, description="Declared value, INR")
    days_after_free:    float     = Field(default=0, ge=0)
    quantity_delivered: Optional[float] = Field(default=None, ge=0)
    containers:         list[ContainerLineModel] = Field(default_factory=list)
    cargo_category:     str = ""
    operation_type:     str = ""
    storage_type:       str = ""


class RailRequest(_Request):
    mode:             Mode  = "both"
    cargo_type:       str   = Field(default="", description="'Container' or a bulk/general label")
    wagon_type:       str   = ""
    num_wagons:       int   = Field(default=0, ge=0)
    operation_hours:  float = Field(default=0, ge=0)
    cargo_weight:     float = Field(default=0, ge=0)
    container_counts: dict[str, int] = Field(
        default_factory=dict,
        description="20ft_Container | 40ft_Container | Above 40ft_Container → boxes",
    )


class StorageRequest(_Request):
    mode:             Mode = "both"
    storage_type:     Literal["immediate", "lease"] = "immediate"
    cargo_mode:       Literal["cargo", "container"] = "cargo"
    cargo:            str   = ""
    weight:           float = Field(default=0, ge=0)
    container_counts: dict[str, int] = Field(
        default_factory=dict,
        description="upto_20ft | 20_to_40ft | above_40ft → boxes",
    )
    area_type:        str = ""
    days:             int = Field(default=0, ge=0)
    lease_type:       str = ""
    lease_location:   Optional[str] = None
    months:           int = Field(default=1, ge=0)


class StevedoreRequest(_Request):
    mode:           Mode  = "both"
    cargo:          str   = ""
    weight:         float = Field(default=0, ge=0)
    labour_line:    str   = ""
    mobile_crane:   Literal["Y", "N"] = "N"
    shift:          str   = "Full"
    royalty_type:   Optional[str] = None


class GuardrailReport(BaseModel):
    passed: bool
    issues: list[str]


class CalculationResponse(BaseModel):
    success:          bool
    request_id:       Optional[str] = None
    timestamp:        str           = Field(default_factory=lambda: datetime.utcnow().isoformat())
    module:           str
    mode:             str
    charges:          dict[str, float]
    subtotal:         float
    taxes:            float
    total:            float
    logistics:        dict[str, Any]       = {}
    breakdown:        list[dict[str, Any]] = []
    guardrail_report: Optional[GuardrailReport] = None
    warnings:         list[str]            = []
    metadata:         dict[str, Any]       = {}


class ErrorResponse(BaseModel):
    success:    bool      = False
    errors:     list[str]
    request_id: Optional[str] = None
