from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ── Request payloads ─────────────────────────────────────────────────────

class MarketEvent(BaseModel):
    date: str = ""
    text: str = ""


class PriceSnapshot(BaseModel):
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    volume: Optional[float] = None


class PriceData(BaseModel):
    btc: Optional[PriceSnapshot] = None
    eth: Optional[PriceSnapshot] = None


class EconomicIndicator(BaseModel):
    model_config = ConfigDict(extra="allow")

    # int stays int so the economic prompt echoes the caller's numbers
    value: Optional[Union[int, float]] = None
    change: Optional[Union[int, float]] = None


class EconomicData(BaseModel):
    # extra indicators are kept so they reach the economic prompt dump
    model_config = ConfigDict(extra="allow")

    unemployment: Optional[EconomicIndicator] = None
    fedRate: Optional[EconomicIndicator] = None
    nfp: Optional[EconomicIndicator] = None
    cpi: Optional[EconomicIndicator] = None


class UploadedFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    size: Optional[int] = None
    type: Optional[str] = None


class ReportRequest(BaseModel):
    events: Optional[List[MarketEvent]] = None
    priceData: Optional[PriceData] = None


class InsightsRequest(BaseModel):
    events: Optional[List[MarketEvent]] = None
    economicData: Optional[EconomicData] = None
    uploadedFiles: Optional[List[UploadedFile]] = None


class EconomicRequest(BaseModel):
    economicData: Optional[EconomicData] = None


# ── Dashboard analysis returned by the model (opt-in validation) ─────────

Trend = Literal["bullish", "bearish", "neutral"]
Level = Literal["High", "Medium", "Low"]


class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow")


class SentimentIndicators(_Loose):
    social: float = Field(ge=0, le=10)
    technical: float = Field(ge=0, le=10)
    fundamental: float = Field(ge=0, le=10)
    onchain: float = Field(ge=0, le=10)


class MarketSentiment(_Loose):
    overall: Literal["Bullish", "Bearish", "Neutral"]
    score: float = Field(ge=0, le=10)
    indicators: SentimentIndicators


class HorizonPrediction(_Loose):
    trend: Trend
    confidence: float = Field(ge=0, le=100)
    priceChange: str
    key_factors: List[str]


class Predictions(_Loose):
    one_day: HorizonPrediction = Field(alias="1d")
    one_week: HorizonPrediction = Field(alias="1w")
    one_month: HorizonPrediction = Field(alias="1m")
    one_year: HorizonPrediction = Field(alias="1y")


class MarketMetrics(_Loose):
    volatility: float
    volume_trend: str
    market_cap_rank: int
    fear_greed_index: float = Field(ge=0, le=100)
    social_sentiment: Literal["Positive", "Negative", "Neutral"]
    technical_score: float = Field(ge=0, le=10)


class RiskFactor(_Loose):
    factor: str
    severity: Level
    impact: str


class AIInsights(_Loose):
    keyOpportunities: List[str]
    riskWarnings: List[str]
    monthlyOutlook: str
    aiRecommendation: str


class PatternAnalysis(_Loose):
    bullishPatterns: Dict[str, float]
    bearishSignals: Dict[str, float]
    patternStrength: Dict[str, float]


class EconomicImpact(_Loose):
    fedPolicy: Literal["Hawkish", "Dovish", "Neutral"]
    inflationPressure: Level
    employmentStrength: Literal["Strong", "Moderate", "Weak"]
    cryptoCorrelation: Dict[str, float]
    nextEventImpact: str


class PerformanceSummary(_Loose):
    period: str
    eventsAnalyzed: int = Field(ge=0)
    avgGain: str
    bestDay: str
    worstDay: str
    volatility: str
    accuracy: str


class MarketAnalysis(_Loose):
    marketSentiment: MarketSentiment
    predictions: Predictions
    marketMetrics: MarketMetrics
    riskFactors: List[RiskFactor]
    aiInsights: AIInsights
    patternAnalysis: PatternAnalysis
    economicImpact: EconomicImpact
    performanceSummary: PerformanceSummary


def dump_economic_data(data: Optional[EconomicData]) -> Dict[str, Any]:
    if data is None:
        return {}
    # only what the caller sent, explicit nulls included
    return data.model_dump(mode="json", exclude_unset=True)
