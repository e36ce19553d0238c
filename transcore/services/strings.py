"""Catalog of UI strings found by static scanning of theme/plugin files.

Catalog rows and their translations are stored separately. A string's
translation is the ``translations`` row with object_type ``'string'``,
field_name ``'text'`` and object_id equal to the catalog id. Because catalog
ids are derived from text + domain, a string re-discovered after
``clear_all`` picks its old translation up again.
"""
import logging
from datetime import datetime

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError

from transcore import db
from transcore.exceptions import InvalidKeyError
from transcore.models import ObjectType, ScannedString, Translation
from transcore.services.fields import normalize_object_id
from transcore.services.fingerprint import scanned_string_id
from transcore.services.store import storage_errors

logger = logging.getLogger(__name__)

STRING_FIELD = 'text'
TRANSLATED_FILTERS = ('', 'yes', 'no')


def record_string(object_id, text, domain='default', context='', page_url=''):
    """Insert a scanned string unless its id is already known.

    A repeat scan keeps the first-seen text and domain and only refreshes
    ``last_seen``.

    Returns:
        True if a new row was created, False if the id already existed.
    """
    object_id = normalize_object_id(object_id)
    if not object_id:
        raise InvalidKeyError("object_id must not be empty")

    with storage_errors("recording scanned string"):
        existing = ScannedString.query.filter_by(object_id=object_id).first()
        if existing:
            existing.last_seen = datetime.utcnow()
            db.session.commit()
            return False

        db.session.add(ScannedString(
            object_id=object_id,
            string_text=text or '',
            domain=domain or 'default',
            context=context or '',
            page_url=(page_url or '')[:500],
        ))
        try:
            db.session.commit()
        except IntegrityError:
            # Same string recorded by a parallel scan
            db.session.rollback()
            return False

    return True


def record_scan(text, domain='default', context='', page_url=''):
    """Record a string under its derived id and return that id."""
    object_id = str(scanned_string_id(text, domain, context))
    record_string(object_id, text, domain, context, page_url)
    return object_id


def _filtered_query(language_code='', domain='', translated='', search='', with_translation=False):
    if translated not in TRANSLATED_FILTERS:
        raise ValueError(f"translated must be one of 'yes', 'no' or '', got {translated!r}")
    if translated and not language_code:
        raise ValueError("the translated filter needs a language_code")

    query = db.session.query(ScannedString)

    if domain:
        query = query.filter(ScannedString.domain == domain)

    if search:
        escaped = search.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
        query = query.filter(ScannedString.string_text.ilike(f'%{escaped}%', escape='\\'))

    if language_code:
        query = query.outerjoin(Translation, and_(
            Translation.object_id == ScannedString.object_id,
            Translation.object_type == ObjectType.STRING,
            Translation.field_name == STRING_FIELD,
            Translation.language_code == language_code,
        ))
        if with_translation:
            query = query.add_columns(Translation.translated_content)
        if translated == 'yes':
            query = query.filter(Translation.translated_content.isnot(None),
                                 Translation.translated_content != '')
        elif translated == 'no':
            query = query.filter(or_(Translation.translated_content.is_(None),
                                     Translation.translated_content == ''))

    return query


def list_strings(language_code='', domain='', translated='', search='', limit=100, offset=0):
    """One page of catalog entries, most recently seen first.

    Each entry carries ``translated_content`` for ``language_code`` (None when
    no language is given or nothing is stored).
    """
    query = _filtered_query(language_code, domain, translated, search, with_translation=bool(language_code))
    query = query.order_by(ScannedString.last_seen.desc(), ScannedString.object_id)

    with storage_errors("listing scanned strings"):
        rows = query.limit(max(0, limit)).offset(max(0, offset)).all()

    entries = []
    for row in rows:
        scanned, translated_content = row if language_code else (row, None)
        entry = scanned.to_dict()
        entry['translated_content'] = translated_content
        entries.append(entry)
    return entries


def count_strings(language_code='', domain='', translated='', search=''):
    """Number of catalog entries matching the same filters as ``list_strings``."""
    query = _filtered_query(language_code, domain, translated, search)
    with storage_errors("counting scanned strings"):
        return query.count()


def list_domains():
    with storage_errors("listing scanned domains"):
        rows = db.session.query(ScannedString.domain).distinct().order_by(ScannedString.domain).all()
    return [row[0] for row in rows]


def delete_string(object_id):
    with storage_errors("deleting scanned string"):
        deleted = ScannedString.query.filter_by(object_id=normalize_object_id(object_id)).delete()
        db.session.commit()
    return deleted > 0


def clear_all():
    """Delete every catalog entry. Translations are kept; see purge_orphaned_translations."""
    with storage_errors("clearing scanned strings"):
        deleted = ScannedString.query.delete()
        db.session.commit()
    logger.info(f"Cleared {deleted} scanned strings")
    return deleted


def purge_orphaned_translations():
    """Delete string translations whose catalog entry no longer exists."""
    with storage_errors("purging orphaned string translations"):
        deleted = Translation.query.filter(
            Translation.object_type == ObjectType.STRING,
            Translation.object_id.notin_(select(ScannedString.object_id)),
        ).delete(synchronize_session=False)
        db.session.commit()
    logger.info(f"Purged {deleted} orphaned string translations")
    return deleted
