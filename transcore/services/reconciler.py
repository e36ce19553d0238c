"""Write a provider's batch result back into the translation store."""
import logging
from dataclasses import dataclass, field
from typing import List

from transcore.services.batching import BatchOriginal
from transcore.services.store import save_translation

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    saved: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def nothing_to_do(self):
        return not self.saved and not self.failed

    @property
    def all_failed(self):
        """Nothing saved but something failed: an error, not "all done"."""
        return not self.saved and bool(self.failed)

    def merge(self, other):
        self.saved.extend(other.saved)
        self.failed.extend(other.failed)
        return self

    def to_dict(self):
        return {
            'saved': list(self.saved),
            'failed': list(self.failed),
            'saved_count': len(self.saved),
            'failed_count': len(self.failed),
        }


def _as_original(value):
    if isinstance(value, BatchOriginal):
        return value
    return BatchOriginal(
        object_id=value['object_id'],
        object_type=value['object_type'],
        field_name=value['field_name'],
        language_code=value['language_code'],
        original_content=value.get('original_content') or '',
    )


def apply_batch_result(results, originals, is_auto=True):
    """Persist every successful item of a batch; report the rest as failed.

    An item fails when its result is missing, empty, not a string, or an
    exception passed through from the provider. Failed items are never
    written, so a translation saved earlier for the same field stays as is.

    Storage faults are not per-item problems and propagate to the caller.

    Args:
        results: {item_id: translated text | Exception | None}
        originals: {item_id: BatchOriginal or equivalent dict}

    Returns:
        BatchOutcome with item ids in ``originals`` order.
    """
    results = results or {}
    outcome = BatchOutcome()

    for item_id, original in originals.items():
        original = _as_original(original)
        translated = results.get(item_id)

        if isinstance(translated, Exception):
            logger.warning(f"Translation failed for {item_id}: {translated}")
            outcome.failed.append(item_id)
            continue
        if not isinstance(translated, str) or not translated.strip():
            logger.warning(f"No translation returned for {item_id}")
            outcome.failed.append(item_id)
            continue

        save_translation(
            original.object_id,
            original.object_type,
            original.field_name,
            original.language_code,
            original.original_content,
            translated,
            is_auto=is_auto,
        )
        outcome.saved.append(item_id)

    unexpected = set(results) - set(originals)
    if unexpected:
        logger.warning(f"Ignoring {len(unexpected)} result ids not in the batch: {sorted(unexpected)[:5]}")

    logger.info(f"Batch applied: {len(outcome.saved)} saved, {len(outcome.failed)} failed")
    return outcome
