"""JSON error handling and request parsing shared by the blueprints."""
import logging
from functools import wraps

from flask import current_app, jsonify, request

from transcore.exceptions import StorageError
from transcore.services.fields import fields_from_mapping

logger = logging.getLogger(__name__)


def error_response(message, status):
    return jsonify({'error': message}), status


def handle_core_errors(f):
    """Map service exceptions onto HTTP status codes.

    Bad keys and arguments are 400, database faults 503, anything else 500.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ValueError as e:
            # InvalidKeyError is a ValueError as well
            return error_response(str(e), 400)
        except StorageError as e:
            logger.error(f"Storage error in {f.__name__}: {e}", exc_info=True)
            return error_response('Storage unavailable', 503)
        except Exception as e:
            logger.error(f"Error in {f.__name__}: {e}", exc_info=True)
            return error_response(str(e), 500)
    return decorated


def get_language(value=None):
    """Target language for the request: explicit value, ``?lang=``, then the default.

    Raises:
        ValueError: no usable language could be determined.
    """
    from transcore.services.languages import (
        AVAILABLE_LANGUAGES, get_active_languages, get_default_language, resolve_language,
    )

    requested = value if value is not None else request.args.get('lang', '')
    if not isinstance(requested, str):
        raise ValueError("language must be a string")
    active = [language.code for language in get_active_languages()]
    available = active or list(AVAILABLE_LANGUAGES)
    default = get_default_language() or current_app.config.get('DEFAULT_LANGUAGE', '')

    language_code = resolve_language(requested, default, available)
    if requested and language_code != requested.strip().lower():
        raise ValueError(f"Unsupported language: {requested}")
    if not language_code:
        raise ValueError("No target language given")
    return language_code


def snapshots_from_json(data):
    """Source field snapshots from a posted ``objects`` list.

    Expected shape::

        {"objects": [{"object_id": 101, "object_type": "post",
                      "fields": {"title": "Hello", "content": "..."}}]}
    """
    objects = (data or {}).get('objects')
    if not isinstance(objects, list):
        raise ValueError("'objects' must be a list")

    snapshots = []
    for obj in objects:
        if not isinstance(obj, dict):
            raise ValueError("each object must be a JSON object")
        fields = obj.get('fields') or {}
        if not isinstance(fields, dict):
            raise ValueError("'fields' must map field names to source text")
        object_type = obj.get('object_type') or ''
        if not object_type or obj.get('object_id') in (None, ''):
            raise ValueError("object_id and object_type are required")
        snapshots.extend(fields_from_mapping(obj['object_id'], object_type, fields))
    return snapshots
