import base64, logging

import nacl.utils

from .errors import ConfigError

logger = logging.getLogger(__name__)

WRAP_WIDTH = 120


def generate(bits: int) -> bytes:
    """Return bits/8 bytes from libsodium's CSPRNG. Zero bits gives an empty nonce."""
    if isinstance(bits, bool) or not isinstance(bits, int) or bits < 0:
        raise ConfigError(f"nonce size must be a non-negative integer, got {bits!r}")
    if bits % 8:
        raise ConfigError(f"nonce size must be divisible by 8, got {bits}")
    if bits == 0:
        logger.warning("Nonce size is 0 bits; attestation uniqueness rests on the timestamp only")
        return b""
    return nacl.utils.random(bits // 8)


def encode(nonce: bytes) -> str:
    return base64.b64encode(nonce).decode("ascii")


def wrap(text: str, width: int = WRAP_WIDTH) -> str:
    # layout only: removing whitespace gives back the input
    if width < 1:
        raise ConfigError(f"wrap width must be positive, got {width}")
    return "\n".join(text[i:i + width] for i in range(0, len(text), width))
