"""Driving translation work in small bounded batches.

A "translate all" or "translate changes" action is a loop on the caller's
side: each ``run_batch`` call handles at most ``batch_size`` objects and
returns. The caller repeats until ``done`` is True, and stops early when a
run reports ``all_failed``.
"""
import logging
from dataclasses import dataclass, field

from flask import current_app

from transcore.exceptions import TranslationProviderError
from transcore.services.batching import BatchRequestPayload, build_batch, make_item_id, plan_batch
from transcore.services.fields import as_snapshots
from transcore.services.memory import split_by_memory
from transcore.services.reconciler import BatchOutcome, apply_batch_result
from transcore.services.staleness import StalenessStatus, classify_fields

logger = logging.getLogger(__name__)

MODES = {
    'missing': {StalenessStatus.MISSING},
    'stale': {StalenessStatus.STALE},
    'pending': {StalenessStatus.MISSING, StalenessStatus.STALE},
}


@dataclass
class BatchRun:
    done: bool
    outcome: BatchOutcome = field(default_factory=BatchOutcome)
    remaining: int = 0
    from_memory: int = 0

    def to_dict(self):
        data = self.outcome.to_dict()
        data.update({
            'done': self.done,
            'remaining': self.remaining,
            'from_memory': self.from_memory,
            'all_failed': self.outcome.all_failed,
        })
        return data


def collect_candidates(sources, language_code, mode='pending'):
    """Fields that need work in ``mode``, in the order the caller supplied them."""
    if mode not in MODES:
        raise ValueError(f"mode must be one of {sorted(MODES)}, got {mode!r}")
    wanted = MODES[mode]
    return [snapshot for snapshot, status in classify_fields(sources, language_code)
            if status in wanted]


def translate_snapshots(snapshots, language_code, translate_batch, use_memory=True, memory_threshold=100):
    """Translate the given fields in one provider call and store the results.

    Items resolved from translation memory are not sent to the provider. A
    ``TranslationProviderError`` raised by the provider fails every item it
    was asked for; items already resolved from memory are still saved.

    Returns:
        (BatchOutcome, number of items taken from memory)
    """
    payload, originals = build_batch(snapshots, language_code)
    if not payload.items:
        return BatchOutcome(), 0

    hits = {}
    items = payload.items
    if use_memory:
        hits, items = split_by_memory(items, language_code, memory_threshold)

    results = {}
    if items:
        request = BatchRequestPayload(language_code=language_code, items=list(items))
        try:
            results = dict(translate_batch(request) or {})
        except TranslationProviderError as e:
            logger.warning(f"Provider failed for a batch of {len(request)} items [{language_code}]: {e}")
    results.update(hits)

    return apply_batch_result(results, originals), len(hits)


def run_batch(sources, language_code, translate_batch, mode='pending', batch_size=None,
              use_memory=True, memory_threshold=100):
    """Translate the next batch of objects whose fields are missing or stale.

    Source values are read once here; the same values decide the candidates
    and are saved as ``original_content``.

    ``remaining`` counts the objects that still need work afterwards: those
    not planned into this batch plus planned ones with a failed field.
    """
    if batch_size is None:
        batch_size = current_app.config.get('TRANSLATION_BATCH_SIZE', 5)

    candidates = collect_candidates(as_snapshots(sources), language_code, mode)
    if not candidates:
        logger.info(f"Nothing to translate for [{language_code}] in mode {mode!r}")
        return BatchRun(done=True)

    objects = list(dict.fromkeys(c.object_key for c in candidates))
    planned = set(plan_batch(objects, batch_size))
    batch_fields = [c for c in candidates if c.object_key in planned]

    outcome, from_memory = translate_snapshots(
        batch_fields, language_code, translate_batch,
        use_memory=use_memory, memory_threshold=memory_threshold,
    )

    failed_ids = set(outcome.failed)
    retry = {c.object_key for c in batch_fields
             if make_item_id(c.object_id, c.object_type, c.field_name) in failed_ids}

    run = BatchRun(
        done=False,
        outcome=outcome,
        remaining=len(objects) - len(planned) + len(retry),
        from_memory=from_memory,
    )
    logger.info(
        f"Batch [{language_code}] {mode}: {len(planned)} objects, "
        f"{len(outcome.saved)} fields saved, {len(outcome.failed)} failed, {run.remaining} objects left"
    )
    return run


def translate_selected(sources, language_code, translate_batch, use_memory=False):
    """Translate the given fields regardless of their current status."""
    snapshots = [s for s in as_snapshots(sources) if s.is_translatable]
    outcome, _ = translate_snapshots(snapshots, language_code, translate_batch, use_memory=use_memory)
    return outcome
