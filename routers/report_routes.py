# routers/report_routes.py
"""
Free-text analyst report backend: events + BTC/ETH prices in, prose out.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from routers.deps import get_analysis_service
from schemas.market_analysis import ReportRequest
from services.ai.errors import InferenceTransportError, RemoteAPIError
from services.ai.market_analysis.analysis_service import MarketAnalysisService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post("/analyze")
async def analyze_report(
    req: Optional[ReportRequest] = None,
    service: MarketAnalysisService = Depends(get_analysis_service),
):
    if req is None or req.events is None or req.priceData is None:
        raise HTTPException(status_code=400, detail="Missing events or priceData")

    try:
        text = await service.report(req.events, req.priceData)
    except RemoteAPIError as e:
        logger.error("Inference API error on /analyze: %s", e.payload)
        raise HTTPException(status_code=500, detail=e.payload)
    except InferenceTransportError as e:
        logger.exception("Inference call failed on /analyze")
        raise HTTPException(status_code=500, detail=str(e))

    return {"analysis": text}
