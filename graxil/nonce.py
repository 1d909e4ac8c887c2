"""Nonce space allocation and pool nonce encoding."""

from __future__ import annotations

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

NONCE_SPACE_PER_THREAD = 1_000_000_000
_XN_BYTES = 2
_LOCAL_BYTES = 6
_NONCE_BYTES = 8
_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


def nonce_space_start(thread_id: int) -> int:
    """First nonce of the range reserved for a mining thread."""
    if thread_id < 0:
        raise ValueError(f"thread id must not be negative, got {thread_id}")
    return thread_id * NONCE_SPACE_PER_THREAD


def _decode_extranonce(extranonce: str) -> bytes:
    if not _HEX_RE.fullmatch(extranonce):
        logger.warning("Failed to decode XN '%s', using fallback", extranonce)
        return bytes(_XN_BYTES)
    raw = bytes.fromhex(extranonce)
    if len(raw) != _XN_BYTES:
        logger.warning("XN '%s' is not %d bytes, using fallback", extranonce, _XN_BYTES)
    return raw[:_XN_BYTES].ljust(_XN_BYTES, b"\x00")


def compose_nonce(nonce: int, extranonce: Optional[str] = None) -> str:
    """Hex encoding of the 8-byte nonce submitted to the pool.

    Without an extra nonce this is the little-endian nonce. With one, the
    pool's two extra-nonce bytes come first, followed by the low six
    little-endian bytes of the local nonce.
    """
    if not 0 <= nonce < 1 << 64:
        raise ValueError(f"nonce must fit in 64 unsigned bits, got {nonce}")
    local = nonce.to_bytes(_NONCE_BYTES, "little")
    if extranonce is None:
        return local.hex()
    combined = _decode_extranonce(extranonce) + local[:_LOCAL_BYTES]
    logger.debug("Nonce with XN=%s: %s", extranonce, combined.hex())
    return combined.hex()