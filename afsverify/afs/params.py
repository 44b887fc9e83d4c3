from __future__ import annotations

import uuid
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from afsverify.core.errors import InvalidParamError

AFS_ENDPOINT = "https://afs.aliyuncs.com"

# Sent on every call unless the caller overrides them
DEFAULT_PARAMS: Mapping[str, str] = MappingProxyType(
    {
        "Action": "AuthenticateSig",
        "Format": "JSON",
        "RegionId": "cn-hangzhou",
        "SignatureMethod": "HMAC-SHA1",
        "SignatureVersion": "1.0",
        "Version": "2018-01-12",
    }
)

REQUIRED_OPTIONS = ("Token", "SessionId", "Sig", "RemoteIp")

SIGNATURE_KEY = "Signature"


def new_nonce() -> str:
    # 128 random bits, no dashes
    return uuid.uuid4().hex


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """
    ISO-8601 UTC with milliseconds and a Z suffix: 2018-01-12T08:30:00.000Z
    """
    now = now or datetime.now(timezone.utc)
    return (
        now.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def generated_params(
    *, nonce: Optional[str] = None, timestamp: Optional[str] = None
) -> Dict[str, str]:
    return {
        "SignatureNonce": nonce or new_nonce(),
        "Timestamp": timestamp or utc_timestamp(),
    }


def require_options(options: Mapping[str, Any]) -> None:
    missing = [
        k for k in REQUIRED_OPTIONS if not str(options.get(k) or "").strip()
    ]
    if missing:
        raise InvalidParamError(f"missing param: {', '.join(missing)}")


def merge_params(
    defaults: Mapping[str, Any],
    generated: Mapping[str, Any],
    credentials: Mapping[str, Any],
    options: Mapping[str, Any],
) -> Mapping[str, str]:
    """
    Merge the parameter layers; later layers win on key collision:
    defaults -> generated -> credentials -> options.

    None option values are dropped, values are rendered with str(),
    and a Signature key is never carried into the signed set.
    """
    out: Dict[str, str] = {}
    for layer in (defaults, generated, credentials, options):
        for k, v in layer.items():
            if v is None:
                continue
            out[str(k)] = str(v)
    out.pop(SIGNATURE_KEY, None)
    return MappingProxyType(out)
