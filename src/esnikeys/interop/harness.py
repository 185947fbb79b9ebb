"""Text transport helpers for ESNIKeys records.

TXT records carry the ESNIKeys structure base64-encoded; hex is accepted for
pasting test vectors.
"""
from __future__ import annotations

import base64
import binascii

from ..exceptions import DecodingError
from ..protocol.keys import ESNIKeys


def record_bytes(text: str, encoding: str = "base64") -> bytes:
    """Turn a textual record into raw bytes.

    Raises:
        DecodingError: If the text is not valid for the chosen encoding.
    """
    text = text.strip().strip('"')
    try:
        if encoding == "hex":
            return bytes.fromhex(text)
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodingError(f"invalid {encoding} record text") from e


def import_keys_b64(text: str) -> ESNIKeys:
    return ESNIKeys.deserialize(record_bytes(text, "base64"))


def export_keys_b64(keys: ESNIKeys) -> str:
    return base64.b64encode(keys.serialize()).decode("ascii")


def import_keys_hex(text: str) -> ESNIKeys:
    return ESNIKeys.deserialize(record_bytes(text, "hex"))


def export_keys_hex(keys: ESNIKeys) -> str:
    return keys.serialize().hex()


def hexdump(data: bytes) -> str:
    """Canonical hex+ASCII dump, 16 bytes per line."""
    lines = []
    for off in range(0, len(data), 16):
        chunk = data[off : off + 16]
        left = " ".join(f"{b:02x}" for b in chunk[:8])
        right = " ".join(f"{b:02x}" for b in chunk[8:])
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"{off:08x}  {left:<23}  {right:<23}  |{text}|")
    return "\n".join(lines)
