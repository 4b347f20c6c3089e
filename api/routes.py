"""
api/routes.py
REST endpoints, one POST per SPLS module plus /health and /tables.
"""
import time
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from api.models import (
    CalculationResponse,
    CargoRequest,
    GuardrailReport,
    RailRequest,
    StevedoreRequest,
    StorageRequest,
    VesselRequest,
)
from calculation_engine.currency import get_currency_normalizer
from calculation_engine.engine import CalculationEngine
from query_processor.models import ScenarioValidationError
from query_processor.parser import ScenarioBuilder

router = APIRouter()

_engine: Optional[CalculationEngine] = None
_builder = ScenarioBuilder()


def _log():
    from monitoring import get_logger
    return get_logger(__name__)


def get_engine() -> CalculationEngine:
    """Process-wide engine; tests swap it through app.dependency_overrides."""
    global _engine
    if _engine is None:
        _engine = CalculationEngine()
    return _engine


async def _calculate(module: str, request: BaseModel, engine: CalculationEngine) -> CalculationResponse:
    log = _log()
    request_id = str(uuid.uuid4())[:8]
    t0 = time.perf_counter()
    log.info("Calculation request", request_id=request_id, module=module)

    try:
        scenario = _builder.build(module, request.model_dump())
        # currency resolution may block on the exchange-rate API
        result = await run_in_threadpool(engine.calculate, module, scenario)
    except ScenarioValidationError as exc:
        log.info("Scenario rejected", request_id=request_id, module=module, issues=exc.issues)
        raise
    except Exception as exc:
        log.error("Calculation failed", error=str(exc), request_id=request_id, module=module)
        raise HTTPException(status_code=500, detail=str(exc))

    log.info(
        "Calculation complete",
        request_id=request_id,
        module=module,
        elapsed_ms=round((time.perf_counter() - t0) * 1000),
        total=result.total,
    )

    metadata = dict(result.metadata)
    gr = metadata.pop("guardrails", None)
    return CalculationResponse(
        success          =True,
        request_id       =request_id,
        module           =result.module,
        mode             =result.mode,
        charges          ={k: round(v, 2) for k, v in result.charges.items()},
        subtotal         =round(result.subtotal, 2),
        taxes            =round(result.taxes, 2),
        total            =round(result.total, 2),
        logistics        =result.logistics,
        breakdown        =result.breakdown,
        guardrail_report =GuardrailReport(**gr) if gr else None,
        warnings         =result.warnings,
        metadata         =metadata,
    )


# ── Module endpoints ──────────────────────────────────────────────────────────

@router.post(
    "/vessel",
    response_model=CalculationResponse,
    summary="Eligible berths, stay hours and vessel-related charges",
    description="""
Port dues, pilotage and berth hire for a vessel call, plus the berths that can
take the vessel.

```json
{ "gross_tonnage": 30000, "loa": 190, "draft": 11, "beam": 30,
  "cargo": "Coal", "quantity": 50000, "trade_type": "Foreign" }
```
""",
)
async def calculate_vessel(
    request: VesselRequest, engine: CalculationEngine = Depends(get_engine),
) -> CalculationResponse:
    return await _calculate("vessel", request, engine)


@router.post("/cargo", response_model=CalculationResponse, summary="Wharfage and cargo demurrage")
async def calculate_cargo(
    request: CargoRequest, engine: CalculationEngine = Depends(get_engine),
) -> CalculationResponse:
    return await _calculate("cargo", request, engine)


@router.post(
    "/rail", response_model=CalculationResponse,
    summary="Siding plan, haulage, terminal handling and wagon demurrage",
)
async def calculate_rail(
    request: RailRequest, engine: CalculationEngine = Depends(get_engine),
) -> CalculationResponse:
    return await _calculate("rail", request, engine)


@router.post("/storage", response_model=CalculationResponse, summary="Immediate or lease storage")
async def calculate_storage(
    request: StorageRequest, engine: CalculationEngine = Depends(get_engine),
) -> CalculationResponse:
    return await _calculate("storage", request, engine)


@router.post(
    "/stevedore", response_model=CalculationResponse,
    summary="Gangs, composite labour and royalty",
)
async def calculate_stevedore(
    request: StevedoreRequest, engine: CalculationEngine = Depends(get_engine),
) -> CalculationResponse:
    return await _calculate("stevedore", request, engine)


# GET /health

@router.get("/health", summary="Health check")
async def health(engine: CalculationEngine = Depends(get_engine)) -> dict:
    store = engine.store
    currency = get_currency_normalizer()
    rate = await currency.aresolve()
    loaded = store.loaded_tables()
    return {
        "status": "healthy" if loaded else "degraded",
        "modules": engine.modules,
        "knowledge_base": {
            "tables_loaded": len(loaded),
            "rows": store.tables.counts(),
            "sources": store.sources(),
            "sqlite": store.sqlite.stats() if store.sqlite else {},
        },
        "currency": {"inr_per_usd": rate, "source": currency.source},
    }


# GET /tables

@router.get("/tables", summary="List rate tables and their row counts")
async def list_tables(engine: CalculationEngine = Depends(get_engine)) -> dict:
    store = engine.store
    return {"tables": store.sources(), "rows": store.tables.counts()}
