"""Language registry and target-language resolution."""
import logging

from transcore import db
from transcore.models import Language
from transcore.services.store import storage_errors

logger = logging.getLogger(__name__)

# code: (name, native name)
AVAILABLE_LANGUAGES = {
    'en': ('English', 'English'),
    'de': ('German', 'Deutsch'),
    'fr': ('French', 'Français'),
    'es': ('Spanish', 'Español'),
    'it': ('Italian', 'Italiano'),
    'pt': ('Portuguese', 'Português'),
    'nl': ('Dutch', 'Nederlands'),
    'pl': ('Polish', 'Polski'),
    'uk': ('Ukrainian', 'Українська'),
    'ru': ('Russian', 'Русский'),
    'lv': ('Latvian', 'Latviešu'),
    'ja': ('Japanese', '日本語'),
    'zh': ('Chinese', '中文'),
}


def resolve_language(requested, default, available):
    """Pick the language for a request.

    The requested code wins when it is available, then the default, else ''.
    No request or settings state is read here; callers pass both in.
    """
    available = set(available or ())
    requested = (requested or '').strip().lower()
    if requested and requested in available:
        return requested
    default = (default or '').strip().lower()
    if default and default in available:
        return default
    return ''


def get_active_languages():
    with storage_errors("reading languages"):
        return Language.query.filter_by(is_active=True).order_by(
            Language.sort_order, Language.code
        ).all()


def get_default_language():
    with storage_errors("reading default language"):
        language = Language.query.filter_by(is_default=True).first()
    return language.code if language else None


def seed_languages(default_code='en'):
    """Insert the built-in language list once. Returns how many rows were added."""
    with storage_errors("seeding languages"):
        if Language.query.count() > 0:
            return 0

        for sort_order, (code, (name, native_name)) in enumerate(AVAILABLE_LANGUAGES.items()):
            db.session.add(Language(
                code=code,
                name=name,
                native_name=native_name,
                is_default=(code == default_code),
                is_active=True,
                sort_order=sort_order,
            ))
        db.session.commit()

    logger.info(f"Seeded {len(AVAILABLE_LANGUAGES)} languages (default: {default_code})")
    return len(AVAILABLE_LANGUAGES)
