"""Error types raised by the translation core.

Absence is never an error: read paths return ``None`` or an empty list.
"""


class TranslationCoreError(Exception):
    """Base class for errors raised by transcore."""


class InvalidKeyError(TranslationCoreError, ValueError):
    """The (object_id, object_type, field_name, language_code) key is malformed."""


class StorageError(TranslationCoreError):
    """The database rejected a read or write, or is unavailable."""


class TranslationProviderError(TranslationCoreError):
    """The external translation provider failed for an item or a whole batch."""
