"""Translation memory: reuse of earlier translations by exact or fuzzy match.

The memory is not a table of its own. Every stored translation with a
non-empty ``translated_content`` is a memory entry, so anything the
reconciler or a human saves is searchable immediately.
"""
import logging
import math
import re
from dataclasses import dataclass
from difflib import SequenceMatcher

from flask import current_app
from sqlalchemy import func

from transcore import db
from transcore.models import Translation
from transcore.services.fingerprint import fingerprint
from transcore.services.store import storage_errors

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r'<(script|style)[^>]*>.*?</\1>|<[^>]+>', re.IGNORECASE | re.DOTALL)
WHITESPACE_RE = re.compile(r'\s+')
TRAILING_PUNCTUATION = '.,;:!?…。！？'

# Above this length both texts are compared on word overlap as well
SHORT_TEXT_LENGTH = 100
CHAR_COMPARE_LIMIT = 500


@dataclass(frozen=True)
class MemoryHit:
    translation: str
    similarity: int
    source: str  # 'exact' or 'fuzzy'
    original: str

    def to_dict(self):
        return {
            'translation': self.translation,
            'similarity': self.similarity,
            'source': self.source,
            'original': self.original,
        }


def normalize_text(text):
    """Lowercase, tag-free, single-spaced text without trailing punctuation."""
    text = TAG_RE.sub(' ', text or '')
    text = WHITESPACE_RE.sub(' ', text.lower()).strip()
    return text.rstrip(TRAILING_PUNCTUATION).strip()


def _char_ratio(a, b):
    return SequenceMatcher(None, a, b, autojunk=False).ratio()


def calculate_similarity(text1, text2, normalized=False):
    """Similarity score 0-100.

    Short texts use the character ratio alone. Longer texts blend word-set
    overlap (60%) with the character ratio of their first 500 characters (40%).
    """
    if not normalized:
        text1, text2 = normalize_text(text1), normalize_text(text2)
    if not text1 or not text2:
        return 0
    if text1 == text2:
        return 100

    if len(text1) < SHORT_TEXT_LENGTH and len(text2) < SHORT_TEXT_LENGTH:
        return round(_char_ratio(text1, text2) * 100)

    words1, words2 = set(text1.split(' ')), set(text2.split(' '))
    jaccard = len(words1 & words2) / len(words1 | words2)
    char_ratio = _char_ratio(text1[:CHAR_COMPARE_LIMIT], text2[:CHAR_COMPARE_LIMIT])
    return round(jaccard * 60 + char_ratio * 40)


def similarity_ceiling(length1, length2):
    """Highest score ``calculate_similarity`` can give texts of these normalized lengths.

    The character ratio is 2*M / (a + b) with M <= min(a, b). Long texts can
    still share every word, so there only the character part is bounded, and
    only over the compared prefix.
    """
    if not length1 or not length2:
        return 0
    if length1 < SHORT_TEXT_LENGTH and length2 < SHORT_TEXT_LENGTH:
        return 200 * min(length1, length2) / (length1 + length2)
    length1, length2 = min(length1, CHAR_COMPARE_LIMIT), min(length2, CHAR_COMPARE_LIMIT)
    return 60 + 80 * min(length1, length2) / (length1 + length2)


def min_candidate_length(length, min_similarity):
    """Shortest candidate that can still reach ``min_similarity`` against a query of ``length``.

    Candidates shorter than a short query are scored on the character ratio
    alone. Against a long query every candidate gets the blended score.
    """
    threshold = min_similarity - 0.5
    if length < SHORT_TEXT_LENGTH:
        ratio = threshold / 100
    else:
        ratio = (threshold - 60) / 40
        length = min(length, CHAR_COMPARE_LIMIT)
    if ratio <= 0:
        return 0
    ratio = min(ratio, 1.0)
    return math.floor(length * ratio / (2 - ratio))


def _has_translation():
    return (Translation.translated_content.isnot(None), Translation.translated_content != '')


def find_exact(text, language_code):
    """Most recently updated translation of exactly ``text``, or None."""
    if not text:
        return None
    with storage_errors("looking up translation memory"):
        return Translation.query.filter(
            Translation.original_hash == fingerprint(text),
            Translation.original_content == text,
            Translation.language_code == language_code,
            *_has_translation(),
        ).order_by(Translation.updated_at.desc(), Translation.id.desc()).first()


def find_fuzzy(text, language_code, min_similarity=70, limit=5):
    """Ranked similar entries for ``text``.

    Results are sorted by similarity (highest first), then shorter original,
    then original text, and hold one entry per distinct original (the most
    recently updated one). Candidates whose length rules out ``min_similarity``
    are skipped without scoring, and the search is capped at
    ``TM_FUZZY_CANDIDATE_LIMIT`` rows closest in length to the query.

    Returns:
        list of dicts with id, original, translated, similarity, object_type, field_name
    """
    query_text = normalize_text(text)
    if not query_text or limit <= 0:
        return []

    min_similarity = max(0, min(100, min_similarity))
    min_length = min_candidate_length(len(query_text), min_similarity)
    candidate_limit = current_app.config.get('TM_FUZZY_CANDIDATE_LIMIT', 500)

    # Raw length is never below normalized length, so this bound is lossless
    with storage_errors("searching translation memory"):
        candidates = Translation.query.filter(
            Translation.language_code == language_code,
            func.length(Translation.original_content) >= min_length,
            *_has_translation(),
        ).order_by(
            func.abs(func.length(Translation.original_content) - len(query_text)),
            Translation.updated_at.desc(),
            Translation.id.desc(),
        ).limit(candidate_limit).all()

    matches = []
    seen = set()
    for candidate in candidates:
        if candidate.original_content in seen:
            continue
        seen.add(candidate.original_content)

        candidate_text = normalize_text(candidate.original_content)
        if not candidate_text:
            continue
        if similarity_ceiling(len(query_text), len(candidate_text)) < min_similarity - 0.5:
            continue

        similarity = calculate_similarity(query_text, candidate_text, normalized=True)
        if similarity >= min_similarity:
            matches.append({
                'id': candidate.id,
                'original': candidate.original_content,
                'translated': candidate.translated_content,
                'similarity': similarity,
                'object_type': candidate.object_type,
                'field_name': candidate.field_name,
            })

    matches.sort(key=lambda m: (-m['similarity'], len(m['original']), m['original']))
    logger.debug(f"TM fuzzy: {len(candidates)} candidates, {len(matches)} matches for [{language_code}]")
    return matches[:limit]


def lookup(text, language_code, min_similarity=100):
    """Best reusable translation: exact match first, then the top fuzzy match.

    ``min_similarity`` of 100 means exact matches only.
    """
    exact = find_exact(text, language_code)
    if exact:
        return MemoryHit(exact.translated_content, 100, 'exact', exact.original_content)

    if min_similarity >= 100:
        return None

    fuzzy = find_fuzzy(text, language_code, min_similarity, limit=1)
    if fuzzy:
        best = fuzzy[0]
        return MemoryHit(best['translated'], best['similarity'], 'fuzzy', best['original'])
    return None


def suggest(text, language_code, min_similarity=70, limit=5):
    """Suggestions for a translator: the exact match (if any) followed by fuzzy ones."""
    matches = find_fuzzy(text, language_code, min_similarity, limit)
    exact = find_exact(text, language_code)
    if exact:
        matches = [m for m in matches if m['original'] != exact.original_content]
        matches.insert(0, {
            'id': exact.id,
            'original': exact.original_content,
            'translated': exact.translated_content,
            'similarity': 100,
            'object_type': exact.object_type,
            'field_name': exact.field_name,
        })
    return matches[:limit]


def split_by_memory(items, language_code, min_similarity=100):
    """Resolve batch items from memory before calling the provider.

    Returns:
        ({item_id: translation} for hits, [items still needing the provider])
    """
    hits = {}
    remaining = []
    for item in items:
        hit = lookup(item.text, language_code, min_similarity)
        if hit and hit.similarity >= min_similarity:
            hits[item.id] = hit.translation
            logger.debug(f"TM {hit.source} hit ({hit.similarity}%) for {item.id}")
        else:
            remaining.append(item)
    if hits:
        logger.info(f"{len(hits)} items from translation memory, {len(remaining)} need the provider")
    return hits, remaining


def memory_stats(language_code):
    """Entry, distinct-original and character counts for one language."""
    with storage_errors("reading translation memory stats"):
        total_entries, unique_originals, total_chars = db.session.query(
            func.count(Translation.id),
            func.count(func.distinct(Translation.original_hash)),
            func.coalesce(func.sum(func.length(Translation.original_content)), 0),
        ).filter(
            Translation.language_code == language_code,
            *_has_translation(),
        ).one()

    return {
        'total_entries': int(total_entries or 0),
        'unique_originals': int(unique_originals or 0),
        'total_chars': int(total_chars or 0),
    }
