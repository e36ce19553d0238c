"""Test suite for the batch driver behind "translate all" and "translate changes"."""
import pytest

from transcore.services.fields import ContentField, FieldSnapshot
from transcore.services.staleness import StalenessStatus
from transcore.services.store import get_translation, save_translation
from transcore.services.workflow import collect_candidates, run_batch, translate_selected


class TestCollectCandidates:
    def test_modes(self, db_session):
        save_translation(1, 'post', 'title', 'fr', 'Fresh', 'Frais')
        save_translation(2, 'post', 'title', 'fr', 'Old', 'Vieux')
        sources = [
            FieldSnapshot('1', 'post', 'title', 'Fresh'),
            FieldSnapshot('2', 'post', 'title', 'New'),
            FieldSnapshot('3', 'post', 'title', 'Untranslated'),
        ]

        assert [c.object_id for c in collect_candidates(sources, 'fr', 'missing')] == ['3']
        assert [c.object_id for c in collect_candidates(sources, 'fr', 'stale')] == ['2']
        assert [c.object_id for c in collect_candidates(sources, 'fr')] == ['2', '3']

    def test_unknown_mode(self, db_session):
        with pytest.raises(ValueError):
            collect_candidates([], 'fr', 'everything')


class TestRunBatch:
    """One bounded batch per call; callers loop until done."""

    def test_nothing_to_do_is_done(self, db_session, provider, make_post):
        sources = make_post(1, 'Hello', 'Body')
        save_translation(1, 'post', 'title', 'fr', 'Hello', 'Bonjour')
        save_translation(1, 'post', 'content', 'fr', 'Body', 'Corps')

        run = run_batch(sources, 'fr', provider)

        assert run.done is True
        assert run.outcome.nothing_to_do is True
        assert provider.calls == []

    def test_batches_by_object_until_done(self, db_session, provider, make_post):
        sources = []
        for object_id in range(1, 8):
            sources += make_post(object_id)

        first = run_batch(sources, 'fr', provider, batch_size=5)
        assert first.done is False
        assert len(first.outcome.saved) == 10
        assert first.remaining == 2
        assert len(provider.calls) == 1

        second = run_batch(sources, 'fr', provider, batch_size=5)
        assert second.done is False
        assert len(second.outcome.saved) == 4
        assert second.remaining == 0

        third = run_batch(sources, 'fr', provider, batch_size=5)
        assert third.done is True

    def test_default_batch_size_from_config(self, app, db_session, provider, make_post):
        sources = []
        for object_id in range(1, 4):
            sources += make_post(object_id)

        app.config['TRANSLATION_BATCH_SIZE'] = 2
        try:
            run = run_batch(sources, 'fr', provider)
        finally:
            app.config['TRANSLATION_BATCH_SIZE'] = 5

        assert run.remaining == 1

    def test_saved_original_is_the_value_that_was_sent(self, db_session, provider):
        values = iter(['First read', 'Second read'])
        field = ContentField(5, 'option', 'blogname', lambda: next(values))

        run_batch([field], 'fr', provider)

        record = get_translation(5, 'option', 'blogname', 'fr')
        assert record.original_content == 'First read'
        assert record.translated_content == '[fr] First read'
        assert record.is_auto_translated is True

    def test_stale_mode_retranslates_edited_fields(self, db_session, provider):
        save_translation(1, 'post', 'title', 'fr', 'Hello', 'Bonjour')
        sources = [FieldSnapshot('1', 'post', 'title', 'Hello there'), FieldSnapshot('2', 'post', 'title', 'New')]

        run = run_batch(sources, 'fr', provider, mode='stale')

        assert run.outcome.saved == ['post:1:title']
        assert get_translation(1, 'post', 'title', 'fr').original_content == 'Hello there'
        assert get_translation(2, 'post', 'title', 'fr') is None

    def test_partial_failure_keeps_old_translation(self, db_session, provider):
        save_translation(1, 'post', 'title', 'fr', 'Hello', 'Bonjour')
        provider.fail_ids.add('post:1:title')
        sources = [FieldSnapshot('1', 'post', 'title', 'Hello there'), FieldSnapshot('2', 'post', 'title', 'World')]

        run = run_batch(sources, 'fr', provider, use_memory=False)

        assert run.outcome.failed == ['post:1:title']
        assert run.outcome.saved == ['post:2:title']
        assert run.outcome.all_failed is False
        assert run.remaining == 1
        assert get_translation(1, 'post', 'title', 'fr').translated_content == 'Bonjour'

    def test_failed_objects_count_as_remaining(self, db_session, provider, make_post):
        sources = []
        for object_id in range(1, 4):
            sources += make_post(object_id)
        provider.fail_ids.add('post:2:content')

        first = run_batch(sources, 'fr', provider, batch_size=2, use_memory=False)
        assert first.outcome.failed == ['post:2:content']
        assert first.remaining == 2

        provider.fail_ids.clear()
        second = run_batch(sources, 'fr', provider, batch_size=2, use_memory=False)
        assert second.outcome.saved == ['post:2:content', 'post:3:title', 'post:3:content']
        assert second.remaining == 0

    def test_all_failed_is_not_done(self, db_session, provider, make_post):
        provider.raise_error = True

        run = run_batch(make_post(1), 'fr', provider)

        assert run.done is False
        assert run.outcome.all_failed is True
        assert run.to_dict()['all_failed'] is True
        assert run.remaining == 1
        assert get_translation(1, 'post', 'title', 'fr') is None

    def test_missing_results_are_failures(self, db_session, provider):
        provider.skip_ids.add('post:1:title')

        run = run_batch([FieldSnapshot('1', 'post', 'title', 'Hello')], 'fr', provider)

        assert run.outcome.failed == ['post:1:title']
        assert run.outcome.all_failed is True

    def test_memory_hits_skip_the_provider(self, db_session, provider):
        save_translation(9, 'term', 'name', 'fr', 'Shoes', 'Chaussures', is_auto=False)
        sources = [FieldSnapshot('1', 'post', 'title', 'Shoes'), FieldSnapshot('2', 'post', 'title', 'Boots')]

        run = run_batch(sources, 'fr', provider)

        assert run.from_memory == 1
        assert provider.sent_ids == ['post:2:title']
        assert get_translation(1, 'post', 'title', 'fr').translated_content == 'Chaussures'

    def test_memory_disabled(self, db_session, provider):
        save_translation(9, 'term', 'name', 'fr', 'Shoes', 'Chaussures')

        run = run_batch([FieldSnapshot('1', 'post', 'title', 'Shoes')], 'fr', provider, use_memory=False)

        assert run.from_memory == 0
        assert provider.sent_ids == ['post:1:title']

    def test_run_makes_fields_fresh(self, db_session, provider, make_post):
        from transcore.services.staleness import classify_fields

        sources = make_post(3)
        run_batch(sources, 'fr', provider)

        assert {status for _, status in classify_fields(sources, 'fr')} == {StalenessStatus.FRESH}


class TestTranslateSelected:
    def test_translates_fresh_fields_too(self, db_session, provider):
        save_translation(1, 'post', 'title', 'fr', 'Hello', 'Bonjour')

        outcome = translate_selected([FieldSnapshot('1', 'post', 'title', 'Hello')], 'fr', provider)

        assert outcome.saved == ['post:1:title']
        assert get_translation(1, 'post', 'title', 'fr').translated_content == '[fr] Hello'

    def test_skips_empty_fields(self, db_session, provider):
        outcome = translate_selected([FieldSnapshot('1', 'post', 'excerpt', '')], 'fr', provider)

        assert outcome.nothing_to_do is True
        assert provider.calls == []
