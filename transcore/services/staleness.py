"""Classify stored translations as missing, fresh or stale.

Each classification works on a single read of the source value (a
``FieldSnapshot``). The same snapshot is what gets saved as
``original_content`` when the field is translated, so a record saved from a
snapshot is always fresh for that snapshot.
"""
import enum
import logging

from transcore.services.fields import as_snapshots
from transcore.services.fingerprint import fingerprint
from transcore.services.store import get_translations_batch

logger = logging.getLogger(__name__)


class StalenessStatus(str, enum.Enum):
    MISSING = 'missing'
    FRESH = 'fresh'
    STALE = 'stale'


def classify(source_value, record):
    """Compare a live source value with its stored translation record."""
    if record is None or not record.translated_content:
        return StalenessStatus.MISSING
    if fingerprint(source_value or '') == record.original_hash:
        return StalenessStatus.FRESH
    return StalenessStatus.STALE


def classify_fields(sources, language_code):
    """Classify many fields with one batched store lookup.

    Fields whose source value is empty are not translatable and are skipped.

    Returns:
        list of (FieldSnapshot, StalenessStatus) in input order.
    """
    snapshots = [s for s in as_snapshots(sources) if s.is_translatable]
    records = get_translations_batch([s.key for s in snapshots], language_code)
    return [(s, classify(s.value, records.get(s.key))) for s in snapshots]


def is_fully_translated(statuses):
    """True when every status is FRESH; None for an object with no translatable field."""
    statuses = list(statuses)
    if not statuses:
        return None
    return all(status is StalenessStatus.FRESH for status in statuses)


def object_statuses(classified):
    """Fold per-field results into {(object_id, object_type): fully_translated}.

    Only objects that appear in ``classified`` get an entry, so objects without
    translatable fields never reach the progress numbers.
    """
    per_object = {}
    for snapshot, status in classified:
        per_object.setdefault(snapshot.object_key, []).append(status)
    return {key: is_fully_translated(statuses) for key, statuses in per_object.items()}
