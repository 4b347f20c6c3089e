"""
api/app.py
FastAPI application entry point.
Run with:  uvicorn api.app:app --port 8000
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from query_processor.models import ScenarioValidationError


def _field_error(err: dict) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    return f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "invalid value")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=(
            "Port-operations cost estimator. Computes logistics and charges "
            "for the vessel, cargo, rail, storage and stevedore modules from "
            "the SPLS rate masters, with 18% GST on every subtotal."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ScenarioValidationError)
    async def _scenario_handler(request: Request, exc: ScenarioValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"success": False, "errors": exc.issues})

    @app.exception_handler(RequestValidationError)
    async def _request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"success": False, "errors": [_field_error(e) for e in exc.errors()]},
        )

    @app.exception_handler(Exception)
    async def _global_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "detail": str(exc)},
        )

    from api.routes import router
    app.include_router(router, prefix="/api/v1", tags=["Port Cost Estimator"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.app:app", host=settings.api_host, port=settings.api_port, log_level="info")
