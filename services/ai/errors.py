from __future__ import annotations

from typing import Any


class InferenceError(Exception):
    """Base class for failures of the outbound chat-completion call."""


class RemoteAPIError(InferenceError):
    """The provider answered with a non-success status and an error envelope."""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"Inference API returned {status_code}: {payload}")


class InferenceTransportError(InferenceError):
    """The call never produced a usable provider response (network, deadline, bad body)."""
