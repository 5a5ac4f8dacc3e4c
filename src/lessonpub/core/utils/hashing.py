"""Content hashing for change detection between commits"""

import hashlib


def sha256(content: str) -> str:
    """Hex SHA-256 of content with CRLF normalized to LF (64 chars, matches String(64) column)."""
    return hashlib.sha256(content.replace("\r\n", "\n").encode("utf-8")).hexdigest()
