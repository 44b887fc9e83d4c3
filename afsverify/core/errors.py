from __future__ import annotations

from typing import Any, Optional


class AfsError(Exception):
    pass


class ConfigError(AfsError, ValueError):
    """Missing or invalid construction-time credentials / settings."""


class InvalidParamError(AfsError, ValueError):
    """
    Missing required per-call fields.
    Raised before signing so the billable verification is never invoked.
    """


class RequestError(AfsError, RuntimeError):
    """
    Outbound call failed: network error, timeout, HTTP error status
    or a body that is not JSON.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload
