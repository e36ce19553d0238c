"""Test suite for writing provider results back into the store."""
import pytest

from transcore.exceptions import StorageError
from transcore.models import Translation
from transcore.services import reconciler
from transcore.services.batching import BatchOriginal
from transcore.services.fingerprint import fingerprint
from transcore.services.reconciler import BatchOutcome, apply_batch_result
from transcore.services.store import get_translation, save_translation


def _original(object_id, field_name='title', text='Hello', language_code='fr'):
    return BatchOriginal(str(object_id), 'post', field_name, language_code, text)


class TestApplyBatchResult:
    """Per-item isolation of batch results."""

    def test_saves_successful_items(self, db_session):
        originals = {'post:1:title': _original(1), 'post:2:title': _original(2, text='World')}
        results = {'post:1:title': 'Bonjour', 'post:2:title': 'Monde'}

        outcome = apply_batch_result(results, originals)

        assert outcome.saved == ['post:1:title', 'post:2:title']
        assert outcome.failed == []
        record = get_translation(2, 'post', 'title', 'fr')
        assert record.original_content == 'World'
        assert record.translated_content == 'Monde'
        assert record.is_auto_translated is True

    def test_failed_item_keeps_existing_translation(self, db_session):
        save_translation(1, 'post', 'title', 'fr', 'Hello', 'Bonjour (manual)', is_auto=False)
        originals = {'post:1:title': _original(1, text='Hello again'), 'post:2:title': _original(2)}

        outcome = apply_batch_result({'post:2:title': 'Bonjour'}, originals)

        assert outcome.saved == ['post:2:title']
        assert outcome.failed == ['post:1:title']
        record = get_translation(1, 'post', 'title', 'fr')
        assert record.translated_content == 'Bonjour (manual)'
        assert record.original_content == 'Hello'

    @pytest.mark.parametrize('bad_result', [None, '', '   ', 42, RuntimeError('quota exceeded')])
    def test_bad_results_are_failures(self, db_session, bad_result):
        save_translation(1, 'post', 'title', 'fr', 'Hello', 'Bonjour')

        outcome = apply_batch_result({'post:1:title': bad_result}, {'post:1:title': _original(1)})

        assert outcome.failed == ['post:1:title']
        assert get_translation(1, 'post', 'title', 'fr').translated_content == 'Bonjour'

    def test_unexpected_ids_ignored(self, db_session):
        outcome = apply_batch_result({'post:9:title': 'Surprise'}, {'post:1:title': _original(1)})

        assert outcome.failed == ['post:1:title']
        assert get_translation(9, 'post', 'title', 'fr') is None

    def test_dict_originals_accepted(self, db_session):
        originals = {'post:3:title': {
            'object_id': '3', 'object_type': 'post', 'field_name': 'title',
            'language_code': 'de', 'original_content': 'Hello',
        }}
        outcome = apply_batch_result({'post:3:title': 'Hallo'}, originals)

        assert outcome.saved == ['post:3:title']
        assert get_translation(3, 'post', 'title', 'de').translated_content == 'Hallo'

    def test_applying_same_result_twice_is_idempotent(self, db_session):
        originals = {'post:1:title': _original(1, text='Hello')}

        first = apply_batch_result({'post:1:title': 'Bonjour'}, originals)
        record_id = get_translation(1, 'post', 'title', 'fr').id
        second = apply_batch_result({'post:1:title': 'Bonjour'}, originals)

        assert first.saved == second.saved == ['post:1:title']
        assert Translation.query.count() == 1
        record = get_translation(1, 'post', 'title', 'fr')
        assert record.id == record_id
        assert record.original_content == 'Hello'
        assert record.translated_content == 'Bonjour'
        assert record.is_auto_translated is True
        assert record.original_hash == fingerprint('Hello')

    def test_manual_flag(self, db_session):
        apply_batch_result({'post:1:title': 'Salut'}, {'post:1:title': _original(1)}, is_auto=False)
        assert get_translation(1, 'post', 'title', 'fr').is_auto_translated is False

    def test_storage_error_propagates(self, db_session, monkeypatch):
        def broken_save(*args, **kwargs):
            raise StorageError('database is locked')

        monkeypatch.setattr(reconciler, 'save_translation', broken_save)

        with pytest.raises(StorageError):
            apply_batch_result({'post:1:title': 'Bonjour'}, {'post:1:title': _original(1)})


class TestBatchOutcome:
    def test_nothing_to_do_vs_all_failed(self):
        assert BatchOutcome().nothing_to_do is True
        assert BatchOutcome().all_failed is False

        failed = BatchOutcome(failed=['post:1:title'])
        assert failed.nothing_to_do is False
        assert failed.all_failed is True

        partial = BatchOutcome(saved=['post:2:title'], failed=['post:1:title'])
        assert partial.all_failed is False

    def test_merge_and_to_dict(self):
        outcome = BatchOutcome(saved=['a']).merge(BatchOutcome(saved=['b'], failed=['c']))
        assert outcome.to_dict() == {
            'saved': ['a', 'b'],
            'failed': ['c'],
            'saved_count': 2,
            'failed_count': 1,
        }
