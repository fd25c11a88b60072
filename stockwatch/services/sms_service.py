import json
import logging
import re
from urllib import error, request
from urllib.parse import urlparse

from stockwatch.config import get_settings
from stockwatch.core.constants import SMS_SEGMENT_LENGTH

logger = logging.getLogger(__name__)

_NON_DIGIT_RE = re.compile(r"\D+")
_ALLOWED_HTTP_SCHEMES = {"http", "https"}
_REQUEST_TIMEOUT_SECONDS = 15


def normalize_phone(phone):
    value = str(phone or "").strip()
    digits = _NON_DIGIT_RE.sub("", value)
    if not digits:
        return ""
    if value.startswith("+"):
        return "+" + digits
    return digits


def split_message(message, limit=SMS_SEGMENT_LENGTH):
    """Split ``message`` into SMS-sized parts.

    Short messages go out untouched. Longer ones break on line or word
    boundaries where possible and each part is prefixed with ``(i/n)``.
    """
    if len(message) <= limit:
        return [message]

    # Size the "(i/n) " prefix by the part count; a wider count means a re-split.
    digits = 1
    while True:
        parts = _split_body(message, limit - len("({0}/{0}) ".format("9" * digits)))
        if len(str(len(parts))) <= digits:
            break
        digits = len(str(len(parts)))

    total = len(parts)
    return ["({}/{}) {}".format(index, total, part) for index, part in enumerate(parts, start=1)]


def _split_body(message, body_limit):
    parts = []
    remaining = message
    while remaining:
        if len(remaining) <= body_limit:
            parts.append(remaining)
            break
        cut = remaining.rfind("\n", 0, body_limit + 1)
        if cut <= 0:
            cut = remaining.rfind(" ", 0, body_limit + 1)
        if cut <= 0:
            cut = body_limit
        parts.append(remaining[:cut].rstrip())
        remaining = remaining[cut:].lstrip()
    return parts


def build_payload(message, phone):
    normalized_phone = normalize_phone(phone)
    if not normalized_phone:
        raise ValueError("phone is required")
    return {"to": normalized_phone, "message": message}


def validate_api_url(api_url):
    parsed = urlparse(api_url)
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise RuntimeError("SMS_API_URL must be an absolute HTTP(S) URL")
    return api_url


def _raise_http_error(exc):
    body = ""
    try:
        body_bytes = exc.read()
        if body_bytes:
            body = body_bytes.decode("utf-8", errors="replace").strip()
    except (OSError, ValueError):
        body = ""

    if body:
        raise RuntimeError("SMS gateway error: HTTP {} {}".format(exc.code, body)) from exc
    raise RuntimeError("SMS gateway error: HTTP {}".format(exc.code)) from exc


def _post(api_url, auth_header, payload):
    req = request.Request(
        api_url,
        data=json.dumps(payload).encode("utf-8"),
        method="POST",
        headers={
            "Content-Type": "application/json",
            "Authorization": auth_header,
        },
    )
    try:
        with request.urlopen(req, timeout=_REQUEST_TIMEOUT_SECONDS) as response:  # nosec B310
            status_code = response.getcode()
            if status_code < 200 or status_code >= 300:
                raise RuntimeError("SMS gateway error: HTTP {}".format(status_code))
    except error.HTTPError as exc:
        _raise_http_error(exc)
    except error.URLError as exc:
        raise RuntimeError("SMS gateway error: {}".format(exc.reason)) from exc


def send_sms(message, phone, settings=None):
    """Send ``message`` to ``phone`` and return the number of parts posted."""
    settings = settings or get_settings()

    api_url = (settings.SMS_API_URL or "").strip()
    access_token = (settings.SMS_ACCESS_TOKEN or "").strip()

    if not api_url:
        raise RuntimeError("SMS_API_URL is not configured")
    if not access_token:
        raise RuntimeError("SMS_ACCESS_TOKEN is not configured")
    api_url = validate_api_url(api_url)

    if message is None:
        raise ValueError("message is required")
    if phone is None:
        raise ValueError("phone is required")

    message = str(message).strip()
    if not message:
        raise ValueError("message is required")

    if access_token.lower().startswith("bearer "):
        auth_header = access_token
    else:
        auth_header = "Bearer {}".format(access_token)

    parts = split_message(message)
    for part in parts:
        _post(api_url, auth_header, build_payload(part, phone))

    logger.info("SMS sent to %s in %d part(s)", normalize_phone(phone), len(parts))
    return len(parts)


__all__ = ["build_payload", "normalize_phone", "send_sms", "split_message", "validate_api_url"]
