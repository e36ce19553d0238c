"""Routes package for the translation service."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .translations import translations_bp
    from .memory import memory_bp
    from .strings import strings_bp
    from .languages import languages_bp

    app.register_blueprint(translations_bp, url_prefix='/api/translations')
    app.register_blueprint(memory_bp, url_prefix='/api/memory')
    app.register_blueprint(strings_bp, url_prefix='/api/strings')
    app.register_blueprint(languages_bp, url_prefix='/api/languages')
