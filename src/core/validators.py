"""Field formats shared by registration, request models and the API client."""
from __future__ import annotations

import re
from typing import Optional

# Indian mobile number used at registration: 10 digits starting 6-9.
MOBILE_PATTERN = r"^[6-9][0-9]{9}$"
# Lead and profile phone: any 10 digits.
PHONE_PATTERN = r"^\d{10}$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
CITY_PATTERN = r"^[A-Za-z\s]{3,}$"
GST_PATTERN = r"^[A-Za-z0-9]{15}$"
RERA_PATTERN = r"^[A-Za-z0-9/\-]{8,}$"

URL_PREFIXES = ("http://", "https://")

MIN_PASSWORD_LENGTH = 6

_MOBILE_RE = re.compile(MOBILE_PATTERN)
_PHONE_RE = re.compile(PHONE_PATTERN)
_EMAIL_RE = re.compile(EMAIL_PATTERN)
_CITY_RE = re.compile(CITY_PATTERN)
_GST_RE = re.compile(GST_PATTERN)
_RERA_RE = re.compile(RERA_PATTERN)


def is_mobile(value: Optional[str]) -> bool:
    return bool(value) and bool(_MOBILE_RE.match(value))


def is_phone(value: Optional[str]) -> bool:
    return bool(value) and bool(_PHONE_RE.match(value))


def is_email(value: Optional[str]) -> bool:
    return bool(value) and bool(_EMAIL_RE.match(value))


def is_city(value: Optional[str]) -> bool:
    return bool(value) and bool(_CITY_RE.match(value))


def is_gst(value: Optional[str]) -> bool:
    return bool(value) and bool(_GST_RE.match(value))


def is_rera(value: Optional[str]) -> bool:
    return bool(value) and bool(_RERA_RE.match(value))


def is_http_url(value: Optional[str]) -> bool:
    return bool(value) and value.startswith(URL_PREFIXES)


def has_min_length(value: Optional[str], length: int) -> bool:
    return bool(value) and len(value.strip()) >= length


def is_non_negative_number(value: Optional[str]) -> bool:
    if value is None:
        return False
    try:
        return float(value) >= 0
    except (TypeError, ValueError):
        return False
