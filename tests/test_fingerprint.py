"""Test suite for content fingerprints and hash-derived ids."""
import hashlib

from faker import Faker

from transcore.services.fingerprint import fingerprint, generate_hash_id, scanned_string_id

fake = Faker()


class TestFingerprint:
    """Fingerprints decide whether a translation went stale."""

    def test_same_text_same_fingerprint(self):
        text = fake.paragraph()
        assert fingerprint(text) == fingerprint(text)

    def test_known_value(self):
        """The digest does not depend on the process, so stored hashes stay valid."""
        expected = hashlib.sha256('Hello'.encode('utf-8')).hexdigest()[:32]
        assert fingerprint('Hello') == expected

    def test_fixed_length_hex(self):
        value = fingerprint(fake.text())
        assert len(value) == 32
        int(value, 16)

    def test_distinct_texts_distinct_fingerprints(self):
        corpus = {fake.unique.sentence(nb_words=6) for _ in range(2000)}
        corpus.update(['Hello', 'Hello ', 'hello', 'Hello!', ''])
        assert len({fingerprint(text) for text in corpus}) == len(corpus)

    def test_none_treated_as_empty(self):
        assert fingerprint(None) == fingerprint('')

    def test_unicode(self):
        assert fingerprint('Привет') != fingerprint('Привет!')
        assert fingerprint('日本語') == fingerprint('日本語')


class TestHashIds:
    """Ids for objects that have no natural numeric id."""

    def test_generate_hash_id_is_stable_and_positive(self):
        first = generate_hash_id('widget', 'sidebar-1_text-3', 'title')
        assert first == generate_hash_id('widget', 'sidebar-1_text-3', 'title')
        assert 0 < first < 2 ** 60

    def test_suffix_changes_id(self):
        assert generate_hash_id('nav', 'Home') != generate_hash_id('nav', 'Home', 'primary')

    def test_scanned_string_id_depends_on_domain(self):
        text = 'Add to cart'
        assert scanned_string_id(text, 'woocommerce') == scanned_string_id(text, 'woocommerce')
        assert scanned_string_id(text, 'woocommerce') != scanned_string_id(text, 'my-theme')

    def test_scanned_string_id_depends_on_context(self):
        assert scanned_string_id('Post', 'default', 'verb') != scanned_string_id('Post', 'default', 'noun')
        assert scanned_string_id('Post', 'default') == generate_hash_id('gettext', 'Post', 'default')
