"""Access control for the translation admin endpoints.

Two ways in:
- ``X-Admin-Secret`` header matching ``ADMIN_SECRET`` (server-to-server calls)
- ``Authorization: Bearer <jwt>`` signed with ``JWT_SECRET_KEY`` whose payload
  has ``role == 'admin'`` (the admin UI)
"""

import hmac
from functools import wraps

import jwt
from flask import current_app, g, jsonify, request


def _secret_matches():
    secret = current_app.config.get('ADMIN_SECRET')
    if not secret:
        # Secret-based access is disabled when ADMIN_SECRET is not set
        return False
    provided = request.headers.get('X-Admin-Secret', '')
    return hmac.compare_digest(provided, secret)


def admin_required(f):
    """
    Decorator that rejects requests without admin credentials.

    Sets ``g.admin_subject`` to the token subject, or ``'secret'`` when the
    shared secret was used.

    Usage:
        @bp.route('/clear', methods=['DELETE'])
        @admin_required
        def clear():
            ...
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        # Skip authentication in testing mode
        if current_app.config.get('TESTING'):
            g.admin_subject = 'test'
            return f(*args, **kwargs)

        if _secret_matches():
            g.admin_subject = 'secret'
            return f(*args, **kwargs)

        auth_header = request.headers.get('Authorization')
        if not auth_header:
            return jsonify({'error': 'Token is missing'}), 401

        try:
            # Support both "Bearer <token>" and raw token formats
            token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header
            payload = jwt.decode(token, current_app.config['JWT_SECRET_KEY'], algorithms=['HS256'])
        except jwt.ExpiredSignatureError:
            return jsonify({'error': 'Token has expired'}), 401
        except jwt.InvalidTokenError:
            return jsonify({'error': 'Token is invalid'}), 401

        if payload.get('role') != 'admin':
            return jsonify({'error': 'Admin access required'}), 403

        g.admin_subject = str(payload.get('sub') or payload.get('user_id') or 'admin')
        return f(*args, **kwargs)
    return decorated
