# routers/insights_routes.py
"""
Structured insights backend (the deployed one).

- POST /analyze           -> JSON dashboard analysis (parsed, with fallback)
- POST /analyze-economic  -> free-text read of macro indicators
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from routers.deps import get_analysis_service
from schemas.market_analysis import EconomicRequest, InsightsRequest
from services.ai.errors import InferenceTransportError, RemoteAPIError
from services.ai.market_analysis.analysis_service import MarketAnalysisService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post("/analyze")
async def analyze_insights(
    req: Optional[InsightsRequest] = None,
    service: MarketAnalysisService = Depends(get_analysis_service),
):
    """
    Comprehensive analysis. Every field is optional; missing data is rendered
    as N/A in the prompt. A reply that is not valid JSON still returns 200 with
    {"error": "Parsing failed", "raw": ...} as the analysis.
    """
    req = req or InsightsRequest()
    try:
        return await service.insights(req.events, req.economicData, req.uploadedFiles)
    except RemoteAPIError as e:
        logger.error("Inference API error: %s", e.payload)
        raise HTTPException(status_code=500, detail=e.payload)
    except InferenceTransportError as e:
        logger.exception("Server error during analysis")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/analyze-economic")
async def analyze_economic(
    req: Optional[EconomicRequest] = None,
    service: MarketAnalysisService = Depends(get_analysis_service),
):
    if req is None or req.economicData is None:
        raise HTTPException(status_code=400, detail="Missing economicData")

    try:
        text = await service.economic(req.economicData)
    except RemoteAPIError as e:
        logger.error("Inference API error on /analyze-economic: %s", e.payload)
        raise HTTPException(status_code=500, detail=e.payload)
    except InferenceTransportError as e:
        logger.exception("Economic analysis failed")
        raise HTTPException(status_code=500, detail=str(e))

    return {"analysis": text}
