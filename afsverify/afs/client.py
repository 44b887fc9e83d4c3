from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from afsverify.afs.params import (
    AFS_ENDPOINT,
    DEFAULT_PARAMS,
    SIGNATURE_KEY,
    generated_params,
    merge_params,
    require_options,
)
from afsverify.afs.signing import encode_query, sign
from afsverify.afs.transport import RequestsTransport, Transport
from afsverify.core.config import DEFAULT_TIMEOUT_MS, Settings, get_settings
from afsverify.core.errors import ConfigError

log = logging.getLogger("afsverify.client")


@dataclass(frozen=True)
class SignedRequest:
    params: Mapping[str, str]  # everything that was signed
    signature: str
    method: str = "GET"

    def query_params(self) -> Dict[str, str]:
        out = dict(self.params)
        out[SIGNATURE_KEY] = self.signature
        return out

    def query_string(self) -> str:
        return encode_query(self.query_params())


class AfsClient:
    """
    Signs and sends AuthenticateSig calls.

    Credentials are checked once here, so misconfiguration surfaces at
    startup instead of on the first (billed) verification.
    """

    def __init__(
        self,
        access_key_id: str,
        app_key: str,
        access_key_secret: str,
        *,
        endpoint: str = AFS_ENDPOINT,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: Optional[Transport] = None,
    ):
        missing = [
            name
            for name, value in (
                ("AccessKeyId", access_key_id),
                ("AppKey", app_key),
                ("AccessKeySecret", access_key_secret),
            )
            if not str(value or "").strip()
        ]
        if missing:
            raise ConfigError(f"missing config: {', '.join(missing)}")
        if timeout_ms <= 0:
            raise ConfigError("timeout_ms must be > 0")

        self.access_key_id = access_key_id
        self.app_key = app_key
        self._secret = access_key_secret
        self.endpoint = endpoint.rstrip("/")
        self.timeout_ms = int(timeout_ms)
        self.transport: Transport = transport or RequestsTransport()

    @classmethod
    def from_settings(
        cls,
        s: Optional[Settings] = None,
        *,
        transport: Optional[Transport] = None,
    ) -> "AfsClient":
        s = s or get_settings()
        s.validate_runtime()
        return cls(
            s.AFS_ACCESS_KEY_ID,
            s.AFS_APP_KEY,
            s.AFS_ACCESS_KEY_SECRET,
            endpoint=s.AFS_ENDPOINT,
            timeout_ms=s.AFS_TIMEOUT_MS,
            transport=transport,
        )

    def _credential_params(self) -> Dict[str, str]:
        return {"AccessKeyId": self.access_key_id, "AppKey": self.app_key}

    def build_request(
        self, opts: Optional[Mapping[str, Any]] = None, **fields: Any
    ) -> SignedRequest:
        """
        Validate per-call fields, merge every parameter layer and sign.
        No network.

        Required: Token, SessionId, Sig, RemoteIp. Optional: Scene.
        Any other field is passed through and signed.
        """
        options: Dict[str, Any] = dict(opts or {})
        options.update(fields)
        require_options(options)

        params = merge_params(
            DEFAULT_PARAMS,
            generated_params(),
            self._credential_params(),
            options,
        )
        signature = sign(params, self._secret, "GET")

        log.debug(
            "AFS request built action=%s nonce=%s keys=%s",
            params.get("Action"),
            params.get("SignatureNonce"),
            sorted(params),
        )
        return SignedRequest(params=params, signature=signature)

    def authenticate_sig(
        self, opts: Optional[Mapping[str, Any]] = None, **fields: Any
    ) -> Any:
        """
        One signed GET to the verifier. Returns the decoded JSON body as is;
        Code / success handling is up to the caller.
        """
        req = self.build_request(opts, **fields)
        return self.transport.get_json(
            self.endpoint,
            req.query_params(),
            timeout_s=self.timeout_ms / 1000.0,
        )

    __call__ = authenticate_sig


def make_verifier(
    config: Mapping[str, str], *, transport: Optional[Transport] = None
) -> Callable[..., Any]:
    """
    config: {"AccessKeyId": ..., "AppKey": ..., "AccessKeySecret": ...}
    Returns a function taking the per-call fields.
    """
    config = config or {}
    client = AfsClient(
        config.get("AccessKeyId", ""),
        config.get("AppKey", ""),
        config.get("AccessKeySecret", ""),
        transport=transport,
    )
    return client.authenticate_sig
