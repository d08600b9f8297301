from fastapi import Request

from config.settings import AppSettings
from services.ai.market_analysis.analysis_service import MarketAnalysisService


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_analysis_service(request: Request) -> MarketAnalysisService:
    settings: AppSettings = request.app.state.settings
    return MarketAnalysisService(
        request.app.state.gateway,
        validate_schema=settings.validate_schema,
    )
