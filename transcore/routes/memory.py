"""Translation memory routes - suggestions for editors and per-language stats."""

from flask import Blueprint, current_app, jsonify, request

from transcore.services.memory import memory_stats, suggest
from transcore.utils import error_response, get_language, handle_core_errors

memory_bp = Blueprint('memory', __name__)


@memory_bp.route('/suggest', methods=['GET'])
@handle_core_errors
def get_suggestions():
    """Reusable translations for a text.

    Query params:
    - text: source text (required)
    - lang: target language
    - min_similarity: 0-100 (default: TM_DEFAULT_MIN_SIMILARITY)
    - limit: max suggestions (default: 5)
    """
    text = request.args.get('text', '')
    if not text.strip():
        return error_response('text is required', 400)

    language_code = get_language()
    min_similarity = request.args.get(
        'min_similarity', current_app.config['TM_DEFAULT_MIN_SIMILARITY'], type=int
    )
    limit = request.args.get('limit', 5, type=int)

    if not 0 <= min_similarity <= 100:
        return error_response('min_similarity must be between 0 and 100', 400)
    limit = max(1, min(limit, 50))

    return jsonify({
        'language': language_code,
        'suggestions': suggest(text, language_code, min_similarity, limit),
    }), 200


@memory_bp.route('/stats', methods=['GET'])
@handle_core_errors
def get_memory_stats():
    language_code = get_language()
    stats = memory_stats(language_code)
    stats['language'] = language_code
    return jsonify(stats), 200
