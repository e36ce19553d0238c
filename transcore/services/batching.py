"""Batch construction for the translation provider.

Nothing here talks to the provider or the database: given the same input
the same batch comes out, which keeps batching testable on its own.
"""
from dataclasses import dataclass, field
from typing import List

from transcore.services.fields import as_snapshots, normalize_object_id


@dataclass(frozen=True)
class BatchRequestItem:
    id: str
    text: str
    context: str = ''

    def to_dict(self):
        return {'id': self.id, 'text': self.text, 'context': self.context}


@dataclass
class BatchRequestPayload:
    """What the provider receives: items plus the target language."""
    language_code: str
    items: List[BatchRequestItem] = field(default_factory=list)

    @property
    def ids(self):
        return [item.id for item in self.items]

    def __len__(self):
        return len(self.items)

    def to_dict(self):
        return {
            'language_code': self.language_code,
            'items': [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class BatchOriginal:
    """Where a batch item's result has to be written back."""
    object_id: str
    object_type: str
    field_name: str
    language_code: str
    original_content: str


# Hints forwarded to the provider, keyed by object type or "<type>_<field>"
TRANSLATION_CONTEXTS = {
    'cf7_form': ('This is a Contact Form 7 form template. '
                 'Translate only the human-readable text (labels, placeholders, button text). '
                 'Keep all CF7 shortcode tags like [text your-name], [email your-email], '
                 '[submit "Send"], [textarea message] exactly as they are.'),
    'cf7_mail': ('This is an email template for Contact Form 7. '
                 'Keep all mail-tags like [your-name], [your-email], [your-message] exactly as they are. '
                 'Translate only the surrounding text.'),
    'cf7_message': 'This is a Contact Form 7 message (success/error message).',
    'post_title': 'Page/post title',
    'post_content': 'Main page/post content - preserve all HTML tags and shortcodes',
    'post_excerpt': 'Short description/excerpt',
    'term_name': 'Category/tag/brand name',
    'term_description': 'Category/tag description',
    'attachment_alt': 'Image alt text for accessibility',
    'attachment_title': 'Media file title',
    'attachment_caption': 'Media caption',
    'attachment_description': 'Media description',
    'option': 'Site option/setting',
    'widget': 'Sidebar widget text',
    'wc_attribute': 'WooCommerce product attribute label',
    'menu_item': 'Navigation menu link label',
    'block_item': 'Navigation menu link label',
    'string': 'Theme/plugin UI string',
}


def get_translation_context(object_type: str, field_name: str = '') -> str:
    """Descriptive hint for the provider; empty when nothing specific is known."""
    if object_type in TRANSLATION_CONTEXTS:
        return TRANSLATION_CONTEXTS[object_type]
    return TRANSLATION_CONTEXTS.get(f'{object_type}_{field_name}', '')


def make_item_id(object_id, object_type: str, field_name: str) -> str:
    return f'{object_type}:{normalize_object_id(object_id)}:{field_name}'


def plan_batch(candidates, max_batch_size: int) -> list:
    """First ``max_batch_size`` candidates in the order given.

    Ordering (e.g. oldest untranslated first) is the caller's business.
    """
    if max_batch_size <= 0:
        return []
    return list(candidates)[:max_batch_size]


def build_request(items, language_code: str) -> BatchRequestPayload:
    """Provider payload from request items, dropping items with blank text.

    ``items`` may be ``BatchRequestItem`` objects or dicts with id/text/context.
    """
    payload = BatchRequestPayload(language_code=language_code)
    for item in items:
        if isinstance(item, dict):
            item = BatchRequestItem(
                id=str(item['id']),
                text=item.get('text') or '',
                context=item.get('context') or '',
            )
        if not item.text or not item.text.strip():
            continue
        payload.items.append(item)
    return payload


def build_batch(sources, language_code: str):
    """Request payload plus the write-back map for a list of source fields.

    The snapshot value becomes both the text sent for translation and the
    ``original_content`` saved with the result.

    Returns:
        (BatchRequestPayload, {item_id: BatchOriginal})
    """
    items = []
    originals = {}
    for snapshot in as_snapshots(sources):
        if not snapshot.is_translatable:
            continue
        item_id = make_item_id(snapshot.object_id, snapshot.object_type, snapshot.field_name)
        if item_id in originals:
            continue
        context = snapshot.context or get_translation_context(snapshot.object_type, snapshot.field_name)
        items.append(BatchRequestItem(id=item_id, text=snapshot.value, context=context))
        originals[item_id] = BatchOriginal(
            object_id=normalize_object_id(snapshot.object_id),
            object_type=snapshot.object_type,
            field_name=snapshot.field_name,
            language_code=language_code,
            original_content=snapshot.value,
        )
    return build_request(items, language_code), originals
