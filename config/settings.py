import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ENDPOINT = "https://models.github.ai/inference"
DEFAULT_MODEL = "deepseek/DeepSeek-R1-0528"
DEFAULT_ORIGINS = "http://localhost:5174,https://aicryptoanalyzer.netlify.app"

VARIANTS = ("insights", "report")


def _env_flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes")


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


@dataclass
class AppSettings:
    """Process-wide configuration, resolved once at startup."""

    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    timeout_s: float = 120.0
    variant: str = "insights"
    port: int = 3001
    allowed_origins: List[str] = field(default_factory=lambda: _split_origins(DEFAULT_ORIGINS))
    validate_schema: bool = False

    def __post_init__(self):
        if not self.api_key:
            raise RuntimeError("GITHUB_AI_TOKEN is not set")
        if self.variant not in VARIANTS:
            raise RuntimeError(
                f"APP_VARIANT must be one of {', '.join(VARIANTS)} (got {self.variant!r})"
            )

    @staticmethod
    def from_env() -> "AppSettings":
        # GITHUB_AI_TOKEN is the report backend's name, AZURE_AI_KEY the deployed one
        api_key = (os.getenv("GITHUB_AI_TOKEN") or os.getenv("AZURE_AI_KEY") or "").strip()
        return AppSettings(
            api_key=api_key,
            endpoint=os.getenv("INFERENCE_ENDPOINT") or DEFAULT_ENDPOINT,
            model=os.getenv("INFERENCE_MODEL") or DEFAULT_MODEL,
            timeout_s=float(os.getenv("INFERENCE_TIMEOUT_S", "120")),
            variant=(os.getenv("APP_VARIANT") or "insights").strip().lower(),
            port=int(os.getenv("PORT", "3001")),
            allowed_origins=_split_origins(os.getenv("CORS_ALLOWED_ORIGINS", DEFAULT_ORIGINS)),
            validate_schema=_env_flag("ANALYSIS_VALIDATE_SCHEMA"),
        )
