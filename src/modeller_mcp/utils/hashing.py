"""Hashing helpers for prompt signatures and response snapshots."""

import hashlib


def compute_hash(data: bytes | str, algorithm: str = "sha256") -> str:
    """Compute hash of bytes or text.

    Text is encoded as UTF-8 before hashing.

    Args:
        data: Bytes or string to hash
        algorithm: Hash algorithm to use

    Returns:
        Lowercase hex digest of the hash
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    hasher = hashlib.new(algorithm)
    hasher.update(data)
    return hasher.hexdigest()


def signature_hash(*parts: str) -> str:
    """Hash pipe-joined parts into an uppercase hex signature.

    Args:
        *parts: Values joined with "|" before hashing

    Returns:
        Uppercase SHA-256 hex digest
    """
    return compute_hash("|".join(parts)).upper()
