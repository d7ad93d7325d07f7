"""Webhook payload signature verification."""

import hashlib
import hmac


def compute_signature(app_secret: str, payload: bytes) -> str:
    """Return the ``sha256=<hex>`` signature Facebook sends for ``payload``."""
    digest = hmac.new(app_secret.encode(), payload, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(app_secret: str, payload: bytes, signature: str | None) -> bool:
    """
    Verify the X-Hub-Signature-256 header of a webhook delivery.

    Args:
        app_secret: Facebook App secret
        payload: Raw request body
        signature: Header value, e.g. ``sha256=abc...``

    Returns:
        True if the signature matches the payload
    """
    if not signature or not signature.startswith("sha256="):
        return False
    return hmac.compare_digest(compute_signature(app_secret, payload), signature)
