import hmac
import hashlib
import logging
from typing import Union

logger = logging.getLogger(__name__)


class RequestSecurity:
    """Helper for HMAC request signature verification."""

    @staticmethod
    def sign(payload: Union[str, bytes], secret: str) -> str:
        """Header value for a payload: sha256=<hex>"""
        if isinstance(payload, str):
            payload = payload.encode()
        digest = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
        return f"sha256={digest}"

    @staticmethod
    def verify_signature(
        payload: Union[str, bytes],
        signature_header: str,
        secret: str
    ) -> bool:
        """
        Verify a request signature.

        signature = HMAC-SHA256(payload, secret), sent as sha256=<hex>

        Args:
            payload: Raw request body, signed as bytes
            signature_header: Value of the X-Chat-Signature header
            secret: Shared secret

        Returns:
            True if signature is valid, False otherwise
        """
        if not signature_header or not secret:
            return False

        parts = signature_header.split("=", 1)
        if len(parts) != 2:
            return False

        algo, provided_signature = parts
        if algo != "sha256":
            return False

        expected_signature = RequestSecurity.sign(payload, secret).split("=", 1)[1]

        # Constant-time comparison
        return hmac.compare_digest(expected_signature.encode(), provided_signature.encode())
