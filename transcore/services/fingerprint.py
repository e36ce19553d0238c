"""Content fingerprints and hash-derived ids."""
import hashlib


def fingerprint(text: str) -> str:
    """Stable 128-bit digest (32 hex chars) of ``text``, used to detect source edits."""
    return hashlib.sha256((text or '').encode('utf-8')).hexdigest()[:32]


def generate_hash_id(prefix: str, value: str, suffix: str = '') -> int:
    """Positive integer id for objects with no natural id (widgets, nav labels, strings).

    Takes 60 bits of SHA-256 so it fits a signed BIGINT column.
    """
    data = f'{prefix}_{value}'
    if suffix:
        data += f'_{suffix}'
    return int(hashlib.sha256(data.encode('utf-8')).hexdigest()[:15], 16)


def scanned_string_id(text: str, domain: str, context: str = '') -> int:
    """De-duplication key for a scanned string: same text + domain, same id."""
    value = f'{text}_{context}' if context else text
    return generate_hash_id('gettext', value, domain)
