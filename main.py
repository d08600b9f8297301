# main.py
import logging
import os
from typing import Optional

if os.getenv("DEBUGPY", "0") == "1":
    import debugpy
    debugpy.listen(("0.0.0.0", 5678))

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.logging_config import configure_logging
from config.settings import AppSettings
from middleware.request_logging import RequestLoggingMiddleware
from routers.health_routes import router as health_router
from routers.insights_routes import router as insights_router
from routers.report_routes import router as report_router
from services.ai.llm_service import InferenceGateway, build_gateway

logger = logging.getLogger(__name__)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": jsonable_encoder(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Server error: %s", exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})


def create_app(
    settings: Optional[AppSettings] = None,
    gateway: Optional[InferenceGateway] = None,
) -> FastAPI:
    """
    Build the analyzer app. Settings are resolved (and the credential checked)
    before anything else, so a misconfigured process never starts serving.
    """
    settings = settings or AppSettings.from_env()
    gateway = gateway or build_gateway(settings)

    app = FastAPI(title="AI Crypto Analyzer")
    app.state.settings = settings
    app.state.gateway = gateway

    origins = settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if "*" in origins else origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)

    if settings.variant == "report":
        app.include_router(report_router)
    else:
        app.include_router(insights_router)
    app.include_router(health_router)

    logger.info(
        "analyzer_ready variant=%s model=%s endpoint=%s",
        settings.variant, settings.model, settings.endpoint,
    )
    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = app.state.settings.port
    logger.info("AI Crypto Analyzer running on http://localhost:%s", port)
    uvicorn.run(app, host="0.0.0.0", port=port)
