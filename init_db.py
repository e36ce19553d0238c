#!/usr/bin/env python
"""Database initialization script for the translation service.

Creates the translation tables and seeds the built-in language list.
Run this once before starting the application for the first time
(or use ``flask db upgrade`` when migrations are preferred).

Usage:
    python init_db.py [default_language]
"""

import os
import sys
from transcore import create_app, db


def init_database(default_language=None):
    """Create all tables and seed languages."""

    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)
    default_language = default_language or app.config['DEFAULT_LANGUAGE']

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            print("Creating database tables...")
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")

            db.create_all()

            print("✅ Database tables created successfully!\n")

            tables_info = [
                ("translations", "Per-field translations with source fingerprints"),
                ("scanned_strings", "UI strings found by the theme/plugin scanner"),
                ("languages", "Target languages"),
            ]

            print("Created tables:")
            for table_name, description in tables_info:
                print(f"  ✓ {table_name:<25} - {description}")

            from transcore.services.languages import seed_languages
            added = seed_languages(default_language)
            if added:
                print(f"\n  ✓ Seeded {added} languages (default: {default_language})")
            else:
                print("\n  - Languages already present, nothing seeded")

            print(f"\n{'='*60}")
            print("✅ Database initialization complete!")
            print(f"{'='*60}\n")
            print("Next steps:")
            print("  1. Start the Flask server: python wsgi.py")
            print("  2. Check languages: GET /api/languages")
            print("\n")

            return True

        except Exception as e:
            print(f"❌ Error creating database: {e}\n")
            print(f"Traceback: {type(e).__name__}: {str(e)}")
            return False


if __name__ == '__main__':
    success = init_database(sys.argv[1] if len(sys.argv) > 1 else None)
    sys.exit(0 if success else 1)
