"""Translation routes - per-object hydration, manual saves, status and batch runs."""

import logging

from flask import Blueprint, current_app, jsonify, request

from transcore.services.staleness import StalenessStatus, classify_fields, object_statuses
from transcore.services.store import (
    delete_translations_for_object,
    get_translation_languages,
    get_translations_for_object,
    save_translation,
)
from transcore.services.workflow import MODES, run_batch
from transcore.utils import admin_required, error_response, get_language, handle_core_errors, snapshots_from_json

logger = logging.getLogger(__name__)

translations_bp = Blueprint('translations', __name__)


@translations_bp.route('/<object_type>/<object_id>', methods=['GET'])
@handle_core_errors
def get_object_translations(object_type, object_id):
    """Stored translations of one object for ``?lang=``, keyed by field name."""
    language_code = get_language()
    records = get_translations_for_object(object_id, object_type, language_code)

    return jsonify({
        'object_id': object_id,
        'object_type': object_type,
        'language': language_code,
        'translations': {r.field_name: r.to_dict() for r in records},
        'languages': get_translation_languages(object_id, object_type),
    }), 200


@translations_bp.route('/<object_type>/<object_id>/<field_name>', methods=['PUT'])
@admin_required
@handle_core_errors
def save_manual_translation(object_type, object_id, field_name):
    """Save a translation typed by an editor.

    Body:
    - language: target language code
    - original_content: the source text the editor translated
    - translated_content: the translation ('' clears it)
    """
    data = request.get_json(silent=True) or {}
    language_code = get_language(data.get('language', ''))

    if 'translated_content' not in data:
        return error_response('translated_content is required', 400)

    record = save_translation(
        object_id, object_type, field_name, language_code,
        data.get('original_content') or '',
        data.get('translated_content') or '',
        is_auto=False,
    )
    logger.info(f"Manual translation saved for {object_type}:{object_id}:{field_name} [{language_code}]")
    return jsonify({'message': 'Translation saved', 'translation': record.to_dict()}), 200


@translations_bp.route('/<object_type>/<object_id>', methods=['DELETE'])
@admin_required
@handle_core_errors
def delete_object_translations(object_type, object_id):
    """Drop every language of an object, e.g. after the object was deleted."""
    deleted = delete_translations_for_object(object_id, object_type)
    return jsonify({'deleted': deleted}), 200


@translations_bp.route('/status', methods=['POST'])
@handle_core_errors
def translation_status():
    """Classify posted source fields against the stored translations.

    Body: {"language": "fr", "objects": [{"object_id", "object_type", "fields": {...}}]}
    """
    data = request.get_json(silent=True) or {}
    language_code = get_language(data.get('language', ''))
    classified = classify_fields(snapshots_from_json(data), language_code)

    fields = [{
        'object_id': snapshot.object_id,
        'object_type': snapshot.object_type,
        'field_name': snapshot.field_name,
        'status': status.value,
    } for snapshot, status in classified]

    per_object = object_statuses(classified)
    objects = [{
        'object_id': object_id,
        'object_type': object_type,
        'fully_translated': fully_translated,
    } for (object_id, object_type), fully_translated in per_object.items()]

    translated = sum(1 for o in objects if o['fully_translated'])
    total = len(objects)

    return jsonify({
        'language': language_code,
        'fields': fields,
        'objects': objects,
        'stats': {
            'total': total,
            'translated': translated,
            'percentage': round(translated / total * 100) if total else 0,
            'missing': sum(1 for f in fields if f['status'] == StalenessStatus.MISSING.value),
            'stale': sum(1 for f in fields if f['status'] == StalenessStatus.STALE.value),
        },
    }), 200


@translations_bp.route('/translate', methods=['POST'])
@admin_required
@handle_core_errors
def translate_next_batch():
    """Run one bounded batch with the configured translation provider.

    Body: {"language", "objects", "mode": "missing"|"stale"|"pending",
           "batch_size", "use_memory", "memory_threshold"}

    The caller repeats the request until ``done`` is true. A batch in which
    every item failed answers 502.
    """
    provider = current_app.extensions.get('translation_provider')
    if provider is None:
        return error_response('No translation provider configured', 503)

    data = request.get_json(silent=True) or {}
    language_code = get_language(data.get('language', ''))
    mode = data.get('mode') or 'pending'
    if mode not in MODES:
        return error_response(f"Invalid mode. Must be one of: {', '.join(sorted(MODES))}", 400)

    batch_size = data.get('batch_size')
    if batch_size is not None and (not isinstance(batch_size, int) or batch_size <= 0):
        return error_response('batch_size must be a positive integer', 400)

    memory_threshold = data.get('memory_threshold', 100)
    if not isinstance(memory_threshold, int) or not 0 <= memory_threshold <= 100:
        return error_response('memory_threshold must be an integer between 0 and 100', 400)

    run = run_batch(
        snapshots_from_json(data), language_code, provider,
        mode=mode,
        batch_size=batch_size,
        use_memory=bool(data.get('use_memory', True)),
        memory_threshold=memory_threshold,
    )

    body = run.to_dict()
    body['language'] = language_code
    if run.outcome.all_failed:
        logger.warning(f"Every item failed in translate batch [{language_code}]: {run.outcome.failed}")
        body['error'] = 'Translation failed for every item in the batch'
        return jsonify(body), 502
    return jsonify(body), 200
