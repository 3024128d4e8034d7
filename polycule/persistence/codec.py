"""Snapshot <-> compact transport token.

token = urlsafe-base64(deflate(utf-8(to_dot(snapshot))))

Both directions are best effort: encoding failures give "", decoding
failures give None, and neither raises.
"""

from __future__ import annotations

import base64
import binascii
import logging
import zlib

from ..dot.grammar import validate_dot
from ..dot.reducer import dot_ast_to_graph
from ..dot.serializer import to_dot
from ..errors import DotSyntaxError
from ..models import GraphSnapshot

logger = logging.getLogger(__name__)

MAX_DECODED_BYTES = 1 << 20


def encode_text(text: str) -> str:
    compressed = zlib.compress(text.encode("utf-8"), 9)
    return base64.urlsafe_b64encode(compressed).decode("ascii")


def decode_text(token: str) -> str:
    """Inverse of `encode_text`.

    Raises:
        ValueError: bad base64, corrupt or oversized stream, or non UTF-8 text.
    """
    raw = token.strip()
    raw += "=" * (-len(raw) % 4)
    try:
        compressed = base64.b64decode(raw.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"Token is not base64: {exc}") from exc

    inflater = zlib.decompressobj()
    try:
        data = inflater.decompress(compressed, MAX_DECODED_BYTES)
    except zlib.error as exc:
        raise ValueError(f"Token is not a deflate stream: {exc}") from exc
    if inflater.unconsumed_tail:
        raise ValueError("Decoded graph is too large")
    if not inflater.eof:
        raise ValueError("Token stream is truncated")
    return data.decode("utf-8")


def encode_graph(snapshot: GraphSnapshot) -> str:
    """Token for `snapshot`, or "" if it cannot be produced."""
    try:
        return encode_text(to_dot(snapshot))
    except (zlib.error, ValueError, TypeError) as exc:
        logger.warning("Could not encode graph: %s", exc)
        return ""


def decode_graph(token: str | None) -> GraphSnapshot | None:
    """Snapshot for `token`, or None if any stage fails."""
    if not token or not token.strip():
        return None
    try:
        text = decode_text(token)
        return dot_ast_to_graph(validate_dot(text))
    except DotSyntaxError as exc:
        logger.debug("Token holds invalid DOT: %s", exc)
    except ValueError as exc:
        logger.debug("Could not decode token: %s", exc)
    return None
