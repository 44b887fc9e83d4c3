import base64
import hashlib
import hmac
from typing import Mapping
from urllib.parse import quote


def escape(value: str) -> str:
    """
    RFC3986 percent-encoding of the UTF-8 bytes of `value`.
    Not escaped: A-Z a-z 0-9 - _ . ~

    quote() with safe="" already escapes ! ' ( ) *, which JavaScript's
    encodeURIComponent leaves alone and the verifier requires escaped.
    """
    return quote(str(value), safe="")


def encode_query(params: Mapping[str, str]) -> str:
    return "&".join(
        f"{escape(k)}={escape(params[k])}" for k in sorted(params)
    )


def canonical_query(params: Mapping[str, str]) -> str:
    # keys sorted by codepoint, not insertion order
    return encode_query(params)


def string_to_sign(params: Mapping[str, str], method: str = "GET") -> str:
    return f"{method.upper()}&{escape('/')}&{escape(canonical_query(params))}"


def sign(params: Mapping[str, str], secret: str, method: str = "GET") -> str:
    """
    HMAC-SHA1 over the signing string, keyed with `secret + "&"`,
    returned base64 encoded.

    Every entry of `params` is signed; the caller must not pass Signature.
    """
    mac = hmac.new(
        f"{secret}&".encode("utf-8"),
        string_to_sign(params, method).encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(mac).decode("utf-8")
