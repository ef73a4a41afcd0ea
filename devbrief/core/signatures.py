# =============================================================================
# devbrief/core/signatures.py
# =============================================================================
import hashlib
import hmac
import time
from typing import Optional, Union

GITHUB_SIGNATURE_PREFIX = "sha256="
SLACK_SIGNATURE_VERSION = "v0"

Body = Union[str, bytes]


def _to_bytes(value: Body) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def _hmac_sha256_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def compute_github_signature(body: Body, secret: str) -> str:
    """Signature GitHub sends in ``X-Hub-Signature-256``."""
    return GITHUB_SIGNATURE_PREFIX + _hmac_sha256_hex(secret, _to_bytes(body))


def verify_github_signature(body: Body, signature: Optional[str], secret: Optional[str]) -> bool:
    if not signature or not secret:
        return False
    expected = compute_github_signature(body, secret)
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))


def compute_slack_signature(body: Body, timestamp: str, secret: str) -> str:
    """Signature Slack sends in ``X-Slack-Signature``: HMAC over ``v0:{timestamp}:{body}``."""
    base_string = f"{SLACK_SIGNATURE_VERSION}:{timestamp}:".encode("utf-8") + _to_bytes(body)
    return f"{SLACK_SIGNATURE_VERSION}=" + _hmac_sha256_hex(secret, base_string)


def verify_slack_signature(
    body: Body,
    timestamp: Optional[str],
    signature: Optional[str],
    secret: Optional[str],
) -> bool:
    if not signature or not timestamp or not secret:
        return False
    expected = compute_slack_signature(body, timestamp, secret)
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))


def is_fresh_slack_timestamp(timestamp: Optional[str], max_age_seconds: int, now: Optional[float] = None) -> bool:
    """Reject replays older than ``max_age_seconds``; a non-positive window accepts everything."""
    if max_age_seconds <= 0:
        return True
    try:
        sent_at = int(timestamp)
    except (TypeError, ValueError):
        return False
    current = time.time() if now is None else now
    return abs(current - sent_at) <= max_age_seconds
