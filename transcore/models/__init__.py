"""Database models for the translation core."""

from .translation import Translation, ObjectType
from .scanned_string import ScannedString
from .language import Language

__all__ = ['Translation', 'ObjectType', 'ScannedString', 'Language']
