"""Language routes."""

from flask import Blueprint, current_app, jsonify

from transcore.services.languages import get_active_languages, get_default_language
from transcore.utils import handle_core_errors

languages_bp = Blueprint('languages', __name__)


@languages_bp.route('', methods=['GET'])
@handle_core_errors
def get_languages():
    """Active target languages, in display order."""
    languages = get_active_languages()
    return jsonify({
        'languages': [language.to_dict() for language in languages],
        'default': get_default_language() or current_app.config.get('DEFAULT_LANGUAGE'),
    }), 200
