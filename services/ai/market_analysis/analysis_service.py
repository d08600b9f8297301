# analysis_service.py
"""
LLM-backed market analysis.

One inbound request maps to exactly one chat-completion call. Provider errors
propagate to the route (RemoteAPIError / InferenceTransportError); only the
structured insights call converts an unparseable reply into data.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from schemas.market_analysis import (
    EconomicData,
    MarketAnalysis,
    MarketEvent,
    PriceData,
    UploadedFile,
)
from services.ai.llm_service import GenerationParams, InferenceGateway
from services.ai.market_analysis.prompt_builder import (
    build_economic_prompt,
    build_insights_prompt,
    build_report_prompt,
)
from services.ai.market_analysis.response_normalizer import normalize_analysis

logger = logging.getLogger(__name__)

REPORT_PARAMS = GenerationParams(max_tokens=2048)
INSIGHTS_PARAMS = GenerationParams(max_tokens=2048, temperature=0.7)
ECONOMIC_PARAMS = GenerationParams(max_tokens=512, temperature=0.6)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class MarketAnalysisService:
    def __init__(self, gateway: InferenceGateway, *, validate_schema: bool = False):
        self.gateway = gateway
        self.validate_schema = validate_schema

    async def report(self, events: Sequence[MarketEvent], price_data: PriceData) -> str:
        """Free-text analyst report over events and BTC/ETH prices."""
        prompt = build_report_prompt(events, price_data)
        logger.info("[Analysis] report events=%d prompt_chars=%d", len(events), len(prompt))
        text = await self.gateway.complete(prompt, REPORT_PARAMS)
        return text

    async def insights(
        self,
        events: Optional[Sequence[MarketEvent]],
        economic_data: Optional[EconomicData],
        uploaded_files: Optional[List[UploadedFile]] = None,
    ) -> Dict[str, Any]:
        prompt = build_insights_prompt(events, economic_data, uploaded_files)
        logger.info(
            "[Analysis] insights events=%d files=%d prompt_chars=%d",
            len(events or []), len(uploaded_files or []), len(prompt),
        )
        text = await self.gateway.complete(prompt, INSIGHTS_PARAMS)
        analysis = normalize_analysis(
            text, schema=MarketAnalysis if self.validate_schema else None
        )
        return {
            "success": True,
            "analysis": analysis,
            "timestamp": utc_timestamp(),
        }

    async def economic(self, economic_data: EconomicData) -> str:
        # schema-hinted in the prompt, returned verbatim
        prompt = build_economic_prompt(economic_data)
        text = await self.gateway.complete(prompt, ECONOMIC_PARAMS)
        return text
