import base64
import secrets
from qrlogin.core.config import settings

# 16 bytes = 128 bits, the floor for an unguessable login token
MIN_TOKEN_BYTES = 16


class TokenService:
    @staticmethod
    def generate(num_bytes: int | None = None) -> str:
        """
        Draws num_bytes from the OS CSPRNG and encodes them as unpadded base64url,
        so the token can be used verbatim as a document key and inside a QR code.
        """
        if num_bytes is None:
            num_bytes = settings.TOKEN_BYTES
        if num_bytes < MIN_TOKEN_BYTES:
            raise ValueError(f"Login tokens need at least {MIN_TOKEN_BYTES} random bytes, got {num_bytes}")

        raw = secrets.token_bytes(num_bytes)
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    @staticmethod
    def encoded_length(num_bytes: int | None = None) -> int:
        if num_bytes is None:
            num_bytes = settings.TOKEN_BYTES
        return (4 * num_bytes + 2) // 3
