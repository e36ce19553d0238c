"""Translation record store.

One row per (object_id, object_type, field_name, language_code). Every save
is an upsert: the row is created on first save and replaced in full on each
later save for the same key.
"""
import logging
from contextlib import contextmanager
from datetime import datetime

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from transcore import db
from transcore.exceptions import InvalidKeyError, StorageError
from transcore.models import Translation
from transcore.services.fields import as_snapshots, normalize_object_id
from transcore.services.fingerprint import fingerprint

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action):
    """Roll back and re-raise database faults as StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Storage error while {action}: {e}", exc_info=True)
        raise StorageError(f"Storage error while {action}") from e


def _validate_key(object_id, object_type, field_name, language_code):
    object_id = normalize_object_id(object_id)
    parts = {
        'object_id': object_id,
        'object_type': object_type,
        'field_name': field_name,
        'language_code': language_code,
    }
    for name, value in parts.items():
        if not isinstance(value, str) or not value.strip():
            raise InvalidKeyError(f"{name} must be a non-empty string, got {value!r}")
    return object_id


def _apply(record, original_content, translated_content, is_auto):
    record.original_content = original_content
    record.original_hash = fingerprint(original_content)
    record.translated_content = translated_content
    record.is_auto_translated = bool(is_auto)
    record.updated_at = datetime.utcnow()


def save_translation(object_id, object_type, field_name, language_code,
                     original_content, translated_content, is_auto=False):
    """Insert or replace the translation for one field in one language.

    ``original_hash`` is always recomputed from ``original_content``. An empty
    ``translated_content`` is a legal value (a cleared manual translation).

    Raises:
        InvalidKeyError: a key part is empty; nothing is written.
        StorageError: the database rejected the write.
    """
    object_id = _validate_key(object_id, object_type, field_name, language_code)
    original_content = original_content or ''
    translated_content = translated_content or ''
    key = dict(object_id=object_id, object_type=object_type,
               field_name=field_name, language_code=language_code)

    with storage_errors(f"saving {object_type}:{object_id}:{field_name} [{language_code}]"):
        record = Translation.query.filter_by(**key).first()
        if record is None:
            record = Translation(**key)
            db.session.add(record)
        _apply(record, original_content, translated_content, is_auto)
        try:
            db.session.commit()
        except IntegrityError:
            # A concurrent writer inserted the same key first; replace its row
            db.session.rollback()
            record = Translation.query.filter_by(**key).one()
            _apply(record, original_content, translated_content, is_auto)
            db.session.commit()

    logger.debug(f"Saved translation {record!r} (auto={bool(is_auto)})")
    return record


def get_translation(object_id, object_type, field_name, language_code):
    """Return the stored translation or None."""
    with storage_errors("reading translation"):
        return Translation.query.filter_by(
            object_id=normalize_object_id(object_id),
            object_type=object_type,
            field_name=field_name,
            language_code=language_code,
        ).first()


def get_translations_for_object(object_id, object_type, language_code):
    """All stored fields of one object in one language, ordered by field name."""
    with storage_errors("reading object translations"):
        return Translation.query.filter_by(
            object_id=normalize_object_id(object_id),
            object_type=object_type,
            language_code=language_code,
        ).order_by(Translation.field_name).all()


def get_translations_batch(keys, language_code):
    """Load many translations with a handful of queries instead of one per field.

    Args:
        keys: iterable of (object_id, object_type, field_name)
        language_code: target language

    Returns:
        dict keyed by (object_id, object_type, field_name) with normalized ids.
        Keys without a stored row are absent.
    """
    groups = {}
    for object_id, object_type, field_name in keys:
        groups.setdefault((object_type, field_name), set()).add(normalize_object_id(object_id))

    chunk_size = max(1, current_app.config.get('STORE_BATCH_CHUNK', 500))
    results = {}

    with storage_errors("batch-loading translations"):
        for (object_type, field_name), ids in groups.items():
            ids = sorted(ids)
            for start in range(0, len(ids), chunk_size):
                rows = Translation.query.filter(
                    Translation.language_code == language_code,
                    Translation.object_type == object_type,
                    Translation.field_name == field_name,
                    Translation.object_id.in_(ids[start:start + chunk_size]),
                ).all()
                for row in rows:
                    results[row.key] = row

    return results


def has_translation(object_id, object_type, language_code):
    """Whether any field of the object has a row in the given language."""
    with storage_errors("checking translation"):
        return db.session.query(
            Translation.query.filter_by(
                object_id=normalize_object_id(object_id),
                object_type=object_type,
                language_code=language_code,
            ).exists()
        ).scalar()


def get_translation_languages(object_id, object_type):
    """Distinct language codes the object has rows for."""
    with storage_errors("reading translation languages"):
        rows = db.session.query(Translation.language_code).filter_by(
            object_id=normalize_object_id(object_id),
            object_type=object_type,
        ).distinct().order_by(Translation.language_code).all()
    return [row[0] for row in rows]


def delete_translation(translation_id):
    """Delete one row by surrogate id. Returns True when a row was removed."""
    with storage_errors("deleting translation"):
        deleted = Translation.query.filter_by(id=translation_id).delete()
        db.session.commit()
    return deleted > 0


def delete_translations_for_object(object_id, object_type):
    """Delete every field in every language of an object the host has deleted."""
    with storage_errors("deleting object translations"):
        deleted = Translation.query.filter_by(
            object_id=normalize_object_id(object_id),
            object_type=object_type,
        ).delete()
        db.session.commit()
    logger.info(f"Deleted {deleted} translations for {object_type}:{object_id}")
    return deleted


def count_rows(language_code, object_type=None):
    """Rows with a non-empty translation in the language."""
    with storage_errors("counting translations"):
        query = db.session.query(func.count(Translation.id)).filter(
            Translation.language_code == language_code,
            Translation.translated_content.isnot(None),
            Translation.translated_content != '',
        )
        if object_type:
            query = query.filter(Translation.object_type == object_type)
        return query.scalar() or 0


# ============================================================================
# AGGREGATES OVER LIVE SOURCES
# ============================================================================

def _select(sources, object_type):
    snapshots = as_snapshots(sources)
    if object_type:
        snapshots = [s for s in snapshots if s.object_type == object_type]
    return snapshots


def count_missing(language_code, sources, object_type=None):
    """Translatable fields with no row or an empty translation."""
    from transcore.services.staleness import StalenessStatus, classify_fields

    classified = classify_fields(_select(sources, object_type), language_code)
    return sum(1 for _, status in classified if status is StalenessStatus.MISSING)


def count_stale(language_code, sources, object_type=None):
    """Translated fields whose source changed since the translation was saved."""
    from transcore.services.staleness import StalenessStatus, classify_fields

    classified = classify_fields(_select(sources, object_type), language_code)
    return sum(1 for _, status in classified if status is StalenessStatus.STALE)


def translation_stats(language_code, sources, object_type=None):
    """Object-level progress for a dashboard.

    An object is translated when every non-empty field is fresh. Objects with
    no translatable field are left out of both numbers.
    """
    from transcore.services.staleness import classify_fields, object_statuses

    statuses = object_statuses(classify_fields(_select(sources, object_type), language_code))
    counted = [done for done in statuses.values() if done is not None]
    total = len(counted)
    translated = sum(1 for done in counted if done)

    return {
        'total': total,
        'translated': translated,
        'percentage': round(translated / total * 100) if total else 0,
    }
