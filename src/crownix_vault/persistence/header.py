# Crownix Vault - Header Codec
#
# On-disk layout (little-endian):
#   [u32 header_length][header_length bytes of UTF-8 JSON][opaque payload]
# The JSON object must carry the format magic and the supported version.
# Everything after the header belongs to the encryption layer and is never
# inspected here.

import json
import struct
from typing import Any, Dict, Optional

VAULT_MAGIC = "CROWNIX_VAULT"
VAULT_VERSION = 1

_LENGTH_PREFIX = struct.Struct("<I")


class HeaderCodec:
    """Pure functions over vault buffers. No I/O."""

    MAGIC = VAULT_MAGIC
    VERSION = VAULT_VERSION

    @staticmethod
    def parse(buffer: bytes) -> Optional[Dict[str, Any]]:
        """
        Return the header object if the buffer carries a trusted header.

        Returns None for a short length prefix, a truncated header region,
        non-UTF-8, non-JSON or too deeply nested header bytes, a non-object
        header, or a magic/version mismatch.
        """
        if buffer is None or len(buffer) < _LENGTH_PREFIX.size:
            return None

        (header_length,) = _LENGTH_PREFIX.unpack_from(buffer, 0)
        start = _LENGTH_PREFIX.size
        end = start + header_length
        if end > len(buffer):
            return None

        try:
            header = json.loads(bytes(buffer[start:end]).decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError):
            return None

        if not isinstance(header, dict):
            return None
        if header.get("magic") != VAULT_MAGIC:
            return None

        # bool is an int subclass; "version": true must not pass as 1
        version = header.get("version")
        if isinstance(version, bool) or not isinstance(version, int):
            return None
        if version != VAULT_VERSION:
            return None

        return header

    @staticmethod
    def validate(buffer: bytes) -> bool:
        """Classify a buffer as trusted vault content. Never raises."""
        return HeaderCodec.parse(buffer) is not None

    @staticmethod
    def encode(payload: bytes, **fields: Any) -> bytes:
        """
        Build a vault buffer with the current magic/version.

        Extra header fields (salt, iv, updatedAt...) are passed through.
        """
        header = dict(fields)
        header["magic"] = VAULT_MAGIC
        header["version"] = VAULT_VERSION
        header_bytes = json.dumps(header, separators=(",", ":")).encode("utf-8")
        return _LENGTH_PREFIX.pack(len(header_bytes)) + header_bytes + bytes(payload)
