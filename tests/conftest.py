"""
Pytest configuration and fixtures for testing the translation service.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from transcore import create_app, db
from transcore.exceptions import TranslationProviderError
from transcore.services.fields import FieldSnapshot

fake = Faker()


class FakeProvider:
    """Stand-in translation provider that records every call.

    Each item is "translated" as ``"[lang] text"`` unless its id is listed in
    ``fail_ids`` (returned as an exception) or ``skip_ids`` (left out).
    ``raise_error`` makes the whole call fail.
    """

    def __init__(self):
        self.calls = []
        self.fail_ids = set()
        self.skip_ids = set()
        self.raise_error = False

    def __call__(self, payload):
        self.calls.append(payload)
        if self.raise_error:
            raise TranslationProviderError('provider unavailable')

        results = {}
        for item in payload.items:
            if item.id in self.skip_ids:
                continue
            if item.id in self.fail_ids:
                results[item.id] = RuntimeError(f'could not translate {item.id}')
                continue
            results[item.id] = f'[{payload.language_code}] {item.text}'
        return results

    @property
    def sent_ids(self):
        return [item_id for payload in self.calls for item_id in payload.ids]


@pytest.fixture(scope='session')
def provider():
    return FakeProvider()


@pytest.fixture(scope='session')
def app(provider):
    """Create application for testing."""
    os.environ['FLASK_ENV'] = 'testing'
    os.environ['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'

    app = create_app('testing', translation_provider=provider)
    app.config['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'
    app.config['ADMIN_SECRET'] = 'test-admin-secret'

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app, provider):
    """Create a fresh database session for each test."""
    provider.calls.clear()
    provider.fail_ids.clear()
    provider.skip_ids.clear()
    provider.raise_error = False

    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


def _make_post(object_id, title=None, content=None):
    return [
        FieldSnapshot(str(object_id), 'post', 'title', fake.sentence(nb_words=4) if title is None else title),
        FieldSnapshot(str(object_id), 'post', 'content', fake.paragraph() if content is None else content),
    ]


@pytest.fixture
def make_post():
    """Factory for source snapshots of a post with a title and a content field."""
    return _make_post


class _NoRow:
    def first(self):
        return None


class LookupMissesOnce:
    """Replaces ``Model.query`` so the first ``filter_by(...).first()`` finds nothing.

    This is what a writer sees when another writer inserts the same key
    between its lookup and its commit. Later lookups hit the real table.
    """

    def __init__(self, model):
        self.model = model
        self.missed = False

    def filter_by(self, **kwargs):
        if not self.missed:
            self.missed = True
            return _NoRow()
        return db.session.query(self.model).filter_by(**kwargs)


@pytest.fixture
def lookup_misses_once(monkeypatch):
    """Make the next row lookup on a model miss, as if a concurrent insert had not committed yet."""
    def patch(model):
        stub = LookupMissesOnce(model)
        monkeypatch.setattr(model, 'query', stub)
        return stub
    return patch


@pytest.fixture
def seeded_languages(app, db_session):
    """Built-in languages with English as default."""
    from transcore.services.languages import seed_languages
    seed_languages('en')
    return db_session
