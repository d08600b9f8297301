# response_normalizer.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

PARSE_FAILED = "Parsing failed"
SCHEMA_FAILED = "Schema validation failed"

RAW_LOG_LIMIT = 4000

_THINK_RE = re.compile(r"<think>[\s\S]*?</think>")
_JSON_FENCE_RE = re.compile(r"```json\n?")
_BARE_FENCE_RE = re.compile(r"```\n?")


def strip_reasoning(text: str) -> str:
    """Drop every <think>...</think> block the reasoning model emits."""
    return _THINK_RE.sub("", text or "")


def strip_code_fences(text: str) -> str:
    t = _JSON_FENCE_RE.sub("", text or "")
    return _BARE_FENCE_RE.sub("", t)


def clean_model_output(text: str) -> str:
    return strip_code_fences(strip_reasoning(text)).strip()


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and cannot be rendered back to the caller
    raise ValueError(f"Invalid JSON constant: {name}")


def _log_raw(raw: str) -> None:
    if len(raw) > RAW_LOG_LIMIT:
        raw = raw[:RAW_LOG_LIMIT] + f"... [{len(raw) - RAW_LOG_LIMIT} more chars]"
    logger.warning("analysis_raw_output %s", raw)


def fallback_payload(raw: str, error: str = PARSE_FAILED) -> Dict[str, Any]:
    return {"error": error, "raw": raw}


def normalize_analysis(
    text: str,
    schema: Optional[Type[BaseModel]] = None,
) -> Any:
    """
    Turn raw model output into the analysis payload.

    Returns the parsed JSON value unmodified, or the fallback
    {"error": ..., "raw": <original text>} when the cleaned text is not JSON
    (or, with `schema`, does not match it). Never raises.
    """
    raw = text or ""
    cleaned = clean_model_output(raw)

    try:
        parsed = json.loads(cleaned, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.warning("analysis_json_parse_failed err=%s", e)
        _log_raw(raw)
        return fallback_payload(raw)

    if schema is not None:
        try:
            schema.model_validate(parsed)
        except ValidationError as e:
            logger.warning(
                "analysis_schema_invalid errors=%d first=%s",
                e.error_count(),
                e.errors()[0].get("loc") if e.errors() else None,
            )
            _log_raw(raw)
            return fallback_payload(raw, SCHEMA_FAILED)

    return parsed
