from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

import requests

from afsverify.afs.signing import encode_query
from afsverify.core.errors import RequestError

log = logging.getLogger("afsverify.transport")


class Transport(Protocol):
    def get_json(
        self, url: str, params: Mapping[str, str], *, timeout_s: float
    ) -> Any: ...


class RequestsTransport:
    """
    GET with a pre-encoded query string, a hard timeout and JSON decoding.

    The query is rendered with the signer's escaping instead of requests'
    own (quote_plus), so the wire form matches what was signed.

    Without an injected session every call goes through requests.get,
    so concurrent calls share no connection state.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session

    def get_json(
        self, url: str, params: Mapping[str, str], *, timeout_s: float
    ) -> Any:
        full_url = f"{url.rstrip('/')}/?{encode_query(params)}"

        try:
            r = (self.session or requests).get(
                full_url,
                headers={"Accept": "application/json"},
                timeout=timeout_s,
            )
        except requests.Timeout as e:
            log.warning("AFS request timed out after %.1fs", timeout_s)
            raise RequestError(f"AFS request timed out after {timeout_s}s") from e
        except requests.RequestException as e:
            log.warning("AFS request failed: %s", e.__class__.__name__)
            raise RequestError(f"AFS request failed: {e.__class__.__name__}") from e

        try:
            data = r.json()
        except ValueError as e:
            if r.status_code >= 400:
                log.warning("AFS HTTP %s", r.status_code)
                raise RequestError(
                    f"AFS HTTP {r.status_code}: {r.text}", status_code=r.status_code
                ) from e
            log.warning("AFS response is not JSON (HTTP %s)", r.status_code)
            raise RequestError(
                f"AFS response is not JSON (HTTP {r.status_code})",
                status_code=r.status_code,
            ) from e

        if r.status_code >= 400:
            log.warning("AFS HTTP %s", r.status_code)
            raise RequestError(
                f"AFS HTTP {r.status_code}: {r.text}",
                status_code=r.status_code,
                payload=data,
            )
        return data
