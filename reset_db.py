"""Database reset script for development.

Drops the translation tables and recreates them with the current schema.
USE ONLY IN DEVELOPMENT - every stored translation is lost!

Usage:
    python reset_db.py
"""

import os
import sys

print("="*60)
print("WARNING: This will DELETE ALL TRANSLATIONS in the database!")
print("This should only be used in development.")
print("="*60)

confirm = input("Type 'yes' to confirm: ")
if confirm.lower() != 'yes':
    print("Aborted.")
    sys.exit(0)

from transcore import create_app, db
from transcore.services.languages import seed_languages

app = create_app(os.getenv('FLASK_ENV', 'development'))

with app.app_context():
    print("\nDropping all tables...")
    db.drop_all()

    print("Creating all tables with current schema...")
    db.create_all()

    added = seed_languages(app.config['DEFAULT_LANGUAGE'])
    print(f"Seeded {added} languages")

    print("\nDatabase reset complete!")
    print("You can now start the server with: python wsgi.py")
