"""
Payload parsing and normalization for donation webhooks.

Saweria (and the relays in front of it) do not agree on encodings or field
names, so ingestion happens in two steps:

1. parse_payload() turns the raw body into a flat dict, choosing a parser
   from the request media type (JSON, form-urlencoded, or a best-effort
   fallback).
2. normalize_donation() maps that dict onto a Donation, taking each logical
   field from the first present key of its alias list.
"""

import json
import math
import time
import uuid
from typing import Any, Callable, Dict, Iterable, Optional, Tuple
from urllib.parse import parse_qsl

from ..store import Amount, Donation, utc_now_iso


Payload = Dict[str, Any]

# Ordered fallback keys for each logical field
ID_KEYS: Tuple[str, ...] = ("id", "transaction_id")
DONOR_NAME_KEYS: Tuple[str, ...] = ("donor_name", "name", "username", "donator_name")
AMOUNT_KEYS: Tuple[str, ...] = ("amount_raw", "amount", "nominal")
MESSAGE_KEYS: Tuple[str, ...] = ("message",)
CREATED_AT_KEYS: Tuple[str, ...] = ("created_at", "timestamp")
STATUS_KEYS: Tuple[str, ...] = ("payment_status", "status", "transaction_status")

ANONYMOUS = "Anonymous"


class MalformedPayloadError(ValueError):
    """Raised when a body declared as JSON cannot be parsed into an object."""


def _parse_json(text: str) -> Payload:
    try:
        payload = json.loads(text)
    except ValueError as e:
        raise MalformedPayloadError(f"Invalid JSON payload: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"JSON payload must be an object, got {type(payload).__name__}"
        )
    return payload


def _parse_form(text: str) -> Payload:
    return dict(parse_qsl(text, keep_blank_values=True))


def _parse_fallback(text: str) -> Payload:
    try:
        return _parse_json(text)
    except MalformedPayloadError:
        return {}


_PARSERS: Dict[str, Callable[[str], Payload]] = {
    "": _parse_json,
    "application/json": _parse_json,
    "text/json": _parse_json,
    "application/x-www-form-urlencoded": _parse_form,
}


def media_type(content_type: Optional[str]) -> str:
    """Strip parameters from a Content-Type header ("a/b; charset=x" -> "a/b")."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def parse_payload(body: bytes, content_type: Optional[str]) -> Payload:
    """
    Parse a raw webhook body into a key/value mapping.

    Args:
        body: Raw request body bytes
        content_type: Content-Type header value, if any

    Returns:
        Parsed payload (empty dict for an empty body)

    Raises:
        MalformedPayloadError: Body declared (or assumed) to be JSON is not a
            JSON object
    """
    text = body.decode("utf-8", errors="replace")
    if not text:
        return {}

    parser = _PARSERS.get(media_type(content_type), _parse_fallback)
    return parser(text)


def _is_present(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def first_present(payload: Payload, keys: Iterable[str], default: Any = None) -> Any:
    """
    Return the value of the first key in `keys` that is present in `payload`.

    None, False, numeric zero and blank strings count as absent, so
    {"amount_raw": 0, "amount": 5000} yields 5000. The string "0" is present.
    """
    for key in keys:
        value = payload.get(key)
        if _is_present(value):
            return value
    return default


def coerce_amount(value: Any) -> Amount:
    """
    Coerce a donation amount to a non-negative number.

    Numbers and numeric strings are accepted; anything else (including
    booleans, NaN and infinities) becomes 0. Negative amounts clamp to 0 and
    integral values are returned as int. Integers of any size are kept exact.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value if value > 0 else 0
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            whole = int(text)
        except ValueError:
            pass
        else:
            return whole if whole > 0 else 0
        try:
            number = float(text)
        except ValueError:
            return 0
    else:
        return 0

    if math.isnan(number) or math.isinf(number) or number <= 0:
        return 0
    if number.is_integer():
        return int(number)
    return number


def payment_status(payload: Payload) -> Optional[str]:
    """Payment status carried by the payload, if any."""
    status = first_present(payload, STATUS_KEYS)
    return str(status) if status is not None else None


def is_paid(status: Optional[str], paid_status: str = "PAID") -> bool:
    """Payloads without a status are treated as paid."""
    if status is None:
        return True
    return status.strip().upper() == paid_status.upper()


def generate_donation_id(prefix: str = "don") -> str:
    """Synthesize an id from the current time, e.g. don-1718000000000-3fa2c1."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def donation_id(payload: Payload) -> str:
    """Donation id from the payload, or a generated one when absent."""
    value = first_present(payload, ID_KEYS)
    if value is None:
        return generate_donation_id()
    return str(value)


def normalize_donation(payload: Payload, donation_id_value: Optional[str] = None) -> Donation:
    """
    Build a Donation from a parsed webhook payload.

    Args:
        payload: Parsed webhook payload
        donation_id_value: Id to use instead of reading it from the payload

    Returns:
        Normalized Donation record
    """
    return Donation(
        id=donation_id_value or donation_id(payload),
        donor_name=str(first_present(payload, DONOR_NAME_KEYS, ANONYMOUS)),
        amount=coerce_amount(first_present(payload, AMOUNT_KEYS, 0)),
        message=str(first_present(payload, MESSAGE_KEYS, "")),
        created_at=str(first_present(payload, CREATED_AT_KEYS) or utc_now_iso()),
    )
