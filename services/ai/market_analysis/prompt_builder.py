# prompt_builder.py
"""
Prompt construction for the market analysis endpoints.

Everything here is pure: inputs are pydantic request models (never mutated),
output is one prompt string. Derived values such as percentage change are
recomputed on every call.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from schemas.market_analysis import (
    EconomicData,
    EconomicIndicator,
    MarketEvent,
    PriceData,
    PriceSnapshot,
    UploadedFile,
    dump_economic_data,
)

NA = "N/A"

# Keeps prompt size (and model latency/cost) bounded for large event dumps
MAX_PROMPT_EVENTS = 50


# ============================================================================
# FORMATTING HELPERS
# ============================================================================

def format_number(value: Optional[float]) -> str:
    """Render like the frontend does: 100 not 100.0, N/A when absent."""
    if value is None:
        return NA
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def percent_change(open_: Optional[float], close: Optional[float]) -> str:
    """(close - open) / open as a percentage with two decimals, e.g. "10.00%".

    Missing endpoints and a zero open both yield N/A.
    """
    if open_ is None or close is None or open_ == 0:
        return NA
    return f"{(close - open_) / open_ * 100:.2f}%"


def format_price_snapshot(snapshot: Optional[PriceSnapshot]) -> Dict[str, str]:
    snap = snapshot or PriceSnapshot()
    return {
        "open": format_number(snap.open),
        "high": format_number(snap.high),
        "low": format_number(snap.low),
        "close": format_number(snap.close),
        "volume": format_number(snap.volume),
        "change": percent_change(snap.open, snap.close),
    }


def format_events(events: Sequence[MarketEvent], *, numbered: bool = False) -> str:
    """First MAX_PROMPT_EVENTS events as `[date] text` lines, plus an omitted-count line."""
    shown = events[:MAX_PROMPT_EVENTS]
    if numbered:
        lines = [f"{i}. [{e.date}] {e.text}" for i, e in enumerate(shown, start=1)]
    else:
        lines = [f"- [{e.date}] {e.text}" for e in shown]
    block = "\n".join(lines)

    remaining = len(events) - len(shown)
    if remaining > 0:
        block += f"\n\n(Plus {remaining} more)"
    return block


def _indicator_line(
    label: str, ind: Optional[EconomicIndicator], *, unit: str = ""
) -> str:
    ind = ind or EconomicIndicator()
    value = format_number(ind.value)
    if value != NA:
        value += unit
    return f"- {label}: {value} (Change: {format_number(ind.change)})"


# ============================================================================
# PROMPTS
# ============================================================================

REPORT_PROMPT = """You are a senior crypto market analyst. Analyze this data and provide a comprehensive report:

## Market Events ({event_count}):
{events_block}

## Price Data:
- BTC: Open ${btc[open]} | Close ${btc[close]} | Change {btc[change]}
- ETH: Open ${eth[open]} | Close ${eth[close]} | Change {eth[change]}

## Required Analysis:
1. Market health assessment with trends
2. Top 3-5 significant events and their impacts
3. Price predictions for 2 weeks and 1 month
4. Economic outlook
5. Investment recommendations (buy/hold/sell)
6. Risk assessment

Format professionally with clear sections. Be data-driven and realistic."""


INSIGHTS_PROMPT = """
You are an advanced AI crypto market analyst. Analyze the provided data and return a structured JSON response with comprehensive market insights.

MARKET EVENTS DATA:
{events_block}

ECONOMIC DATA:
{economic_block}

UPLOADED FILES: {file_count} files uploaded for analysis

ANALYSIS REQUIREMENTS:
Provide a comprehensive JSON response with the following structure. Be specific and data-driven in your analysis:

{{
  "marketSentiment": {{
    "overall": "Bullish/Bearish/Neutral",
    "score": 7.2, // 0-10 scale
    "indicators": {{
      "social": 8.1, // 0-10 based on sentiment
      "technical": 7.5, // 0-10 technical strength
      "fundamental": 6.8, // 0-10 fundamental analysis
      "onchain": 7.9 // 0-10 on-chain metrics
    }}
  }},
  "predictions": {{
    "1d": {{
      "trend": "bullish/bearish/neutral",
      "confidence": 78, // 0-100%
      "priceChange": "+3.2%", // expected % change
      "key_factors": ["Factor 1", "Factor 2", "Factor 3"]
    }},
    "1w": {{
      "trend": "bullish/bearish/neutral",
      "confidence": 65,
      "priceChange": "+8.5%",
      "key_factors": ["Factor 1", "Factor 2", "Factor 3"]
    }},
    "1m": {{
      "trend": "bullish/bearish/neutral",
      "confidence": 52,
      "priceChange": "+2.1%",
      "key_factors": ["Factor 1", "Factor 2", "Factor 3"]
    }},
    "1y": {{
      "trend": "bullish/bearish/neutral",
      "confidence": 71,
      "priceChange": "+45.3%",
      "key_factors": ["Factor 1", "Factor 2", "Factor 3"]
    }}
  }},
  "marketMetrics": {{
    "volatility": 24.5, // percentage
    "volume_trend": "+15.2%", // volume change
    "market_cap_rank": 2, // market position
    "fear_greed_index": 67, // 0-100
    "social_sentiment": "Positive/Negative/Neutral",
    "technical_score": 8.2 // 0-10
  }},
  "riskFactors": [
    {{
      "factor": "Regulatory Risk",
      "severity": "High/Medium/Low",
      "impact": "Detailed impact description"
    }}
  ],
  "aiInsights": {{
    "keyOpportunities": [
      "Specific opportunity 1",
      "Specific opportunity 2",
      "Specific opportunity 3"
    ],
    "riskWarnings": [
      "Specific risk 1",
      "Specific risk 2",
      "Specific risk 3"
    ],
    "monthlyOutlook": "Detailed paragraph about next month expectations based on all data",
    "aiRecommendation": "Specific actionable recommendation based on analysis"
  }},
  "patternAnalysis": {{
    "bullishPatterns": {{
      "volumeSpikes": 3, // count from events
      "breakoutEvents": 2,
      "positiveNews": 4
    }},
    "bearishSignals": {{
      "supportBreaks": 1,
      "negativeEvents": 2,
      "sellPressure": 1
    }},
    "patternStrength": {{
      "bullishMomentum": 75, // 0-100%
      "eventDensity": 2.3 // events per day
    }}
  }},
  "economicImpact": {{
    "fedPolicy": "Hawkish/Dovish/Neutral",
    "inflationPressure": "High/Medium/Low",
    "employmentStrength": "Strong/Moderate/Weak",
    "cryptoCorrelation": {{
      "btcVsFedRate": -0.73, // correlation coefficient
      "cryptoVsCPI": -0.45,
      "altVsUnemployment": -0.32
    }},
    "nextEventImpact": "Analysis of upcoming economic events impact"
  }},
  "performanceSummary": {{
    "period": "December 2024",
    "eventsAnalyzed": {event_count},
    "avgGain": "+12.3%", // calculated estimate
    "bestDay": "+8.2%", // estimated
    "worstDay": "-4.1%", // estimated
    "volatility": "18.5%", // estimated
    "accuracy": "76%" // model confidence
  }}
}}

ANALYSIS INSTRUCTIONS:
1. Base your analysis on the actual events and economic data provided
2. If limited data, acknowledge this but still provide reasonable estimates
3. Make specific, actionable insights rather than generic statements
4. Consider the correlation between economic indicators and crypto markets
5. Factor in current market conditions and recent trends
6. Provide realistic confidence levels based on data quality
7. Include both bullish and bearish scenarios
8. Make the analysis professional and data-driven
9. Ensure all numerical values are realistic and justified
10. Return ONLY the JSON response, no additional text

Begin analysis:"""


ECONOMIC_PROMPT = """Analyze the following economic indicators and their impact on cryptocurrency markets:

{economic_json}

Return JSON with {{ "economicAssessment": "...", "cryptoImpact": "...", "recommendation": "...", "riskLevel": "..." }}"""


# ============================================================================
# BUILDERS
# ============================================================================

def build_report_prompt(events: Sequence[MarketEvent], price_data: PriceData) -> str:
    return REPORT_PROMPT.format(
        event_count=len(events),
        events_block=format_events(events),
        btc=format_price_snapshot(price_data.btc),
        eth=format_price_snapshot(price_data.eth),
    )


def build_economic_block(economic_data: Optional[EconomicData]) -> str:
    econ = economic_data or EconomicData()
    return "\n".join([
        _indicator_line("Unemployment Rate", econ.unemployment, unit="%"),
        _indicator_line("Fed Interest Rate", econ.fedRate, unit="%"),
        _indicator_line("Non-Farm Payrolls", econ.nfp),
        _indicator_line("CPI Inflation", econ.cpi, unit="%"),
    ])


def build_insights_prompt(
    events: Optional[Sequence[MarketEvent]],
    economic_data: Optional[EconomicData],
    uploaded_files: Optional[List[UploadedFile]] = None,
) -> str:
    events = events or []
    events_block = format_events(events, numbered=True) if events else "No events provided"
    return INSIGHTS_PROMPT.format(
        events_block=events_block,
        economic_block=build_economic_block(economic_data),
        file_count=len(uploaded_files or []),
        event_count=len(events),
    )


def build_economic_prompt(economic_data: EconomicData) -> str:
    payload: Dict[str, Any] = dump_economic_data(economic_data)
    return ECONOMIC_PROMPT.format(economic_json=json.dumps(payload, indent=2))
