"""Scanned string routes - the catalog of theme/plugin UI strings."""

import logging

from flask import Blueprint, jsonify, request

from transcore.services.strings import (
    clear_all,
    count_strings,
    delete_string,
    list_domains,
    list_strings,
    purge_orphaned_translations,
    record_string,
)
from transcore.services.fingerprint import scanned_string_id
from transcore.utils import admin_required, error_response, get_language, handle_core_errors

logger = logging.getLogger(__name__)

strings_bp = Blueprint('strings', __name__)


@strings_bp.route('', methods=['GET'])
@handle_core_errors
def get_strings():
    """List catalog entries.

    Query params:
    - lang: include translations for this language
    - domain: text domain filter
    - translated: 'yes' / 'no' (needs lang)
    - search: substring of the string text
    - page: Page number (default: 1)
    - per_page: Items per page (default: 50, max 200)
    """
    language_code = get_language() if request.args.get('lang') else ''
    domain = request.args.get('domain', '')
    translated = request.args.get('translated', '')
    search = request.args.get('search', '')
    page = max(1, request.args.get('page', 1, type=int))
    per_page = max(1, min(request.args.get('per_page', 50, type=int), 200))

    total = count_strings(language_code, domain, translated, search)
    strings = list_strings(language_code, domain, translated, search,
                           limit=per_page, offset=(page - 1) * per_page)

    return jsonify({
        'strings': strings,
        'total': total,
        'page': page,
        'per_page': per_page,
        'pages': (total + per_page - 1) // per_page,
    }), 200


@strings_bp.route('', methods=['POST'])
@admin_required
@handle_core_errors
def post_strings():
    """Record strings found by a scan.

    Body: {"strings": [{"text", "domain", "context", "page_url", "object_id"?}]}
    Entries without ``object_id`` get the id derived from text, context and domain.
    """
    data = request.get_json(silent=True) or {}
    entries = data.get('strings')
    if not isinstance(entries, list):
        return error_response("'strings' must be a list", 400)

    added = 0
    ids = []
    for entry in entries:
        if not isinstance(entry, dict) or not (entry.get('text') or '').strip():
            continue
        domain = entry.get('domain') or 'default'
        context = entry.get('context') or ''
        page_url = entry.get('page_url') or ''
        object_id = str(entry.get('object_id') or scanned_string_id(entry['text'], domain, context))
        added += int(record_string(object_id, entry['text'], domain, context, page_url))
        ids.append(object_id)

    logger.info(f"Scan recorded {len(ids)} strings")
    return jsonify({'recorded': len(ids), 'added': added, 'ids': ids}), 200


@strings_bp.route('', methods=['DELETE'])
@admin_required
@handle_core_errors
def delete_strings():
    """Delete one entry (``?object_id=``) or clear the catalog (``?all=1``).

    With ``purge=1`` string translations left without a catalog entry are
    deleted as well.
    """
    object_id = request.args.get('object_id', '')
    clear = request.args.get('all', '').lower() in ('1', 'true', 'yes')
    purge = request.args.get('purge', '').lower() in ('1', 'true', 'yes')

    if object_id:
        if not delete_string(object_id):
            return error_response('String not found', 404)
        deleted = 1
    elif clear:
        deleted = clear_all()
    else:
        return error_response('object_id or all=1 is required', 400)

    purged = purge_orphaned_translations() if purge else 0
    return jsonify({'deleted': deleted, 'purged_translations': purged}), 200


@strings_bp.route('/domains', methods=['GET'])
@handle_core_errors
def get_domains():
    return jsonify({'domains': list_domains()}), 200
