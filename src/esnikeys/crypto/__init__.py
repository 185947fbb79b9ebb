"""Checksum digest for ESNIKeys records (via the cryptography package)."""
from .checksum import compute_checksum, splice_checksum

__all__ = ["compute_checksum", "splice_checksum"]
