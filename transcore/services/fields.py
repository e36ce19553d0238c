"""Source field descriptors supplied by content adapters.

The core never knows how to fetch a post title or an Elementor widget
heading. Each adapter hands over ``ContentField`` descriptors whose getter
returns the live source value; the core reads it once per operation and
works on the resulting ``FieldSnapshot``.
"""
from dataclasses import dataclass
from typing import Callable, Mapping, Optional


def normalize_object_id(object_id) -> str:
    """Object ids are stored as strings so numeric and hash ids share one column."""
    if object_id is None:
        return ''
    return str(object_id).strip()


@dataclass(frozen=True)
class FieldSnapshot:
    """The value of one source field as read at one point in time."""
    object_id: str
    object_type: str
    field_name: str
    value: str
    context: str = ''

    @property
    def key(self):
        return (normalize_object_id(self.object_id), self.object_type, self.field_name)

    @property
    def object_key(self):
        return (normalize_object_id(self.object_id), self.object_type)

    @property
    def is_translatable(self) -> bool:
        return bool(self.value and self.value.strip())


@dataclass(frozen=True)
class ContentField:
    """Describes where a translatable value lives, without holding the value."""
    object_id: str
    object_type: str
    field_name: str
    getter: Callable[[], Optional[str]]
    context: str = ''

    def snapshot(self) -> FieldSnapshot:
        value = self.getter()
        return FieldSnapshot(
            object_id=normalize_object_id(self.object_id),
            object_type=self.object_type,
            field_name=self.field_name,
            value=value if isinstance(value, str) else ('' if value is None else str(value)),
            context=self.context,
        )


def as_snapshots(sources) -> list:
    """Accept ``ContentField`` descriptors or ready ``FieldSnapshot`` values."""
    return [s.snapshot() if isinstance(s, ContentField) else s for s in sources]


def fields_from_mapping(object_id, object_type: str, values: Mapping[str, str],
                        context_for: Optional[Callable[[str], str]] = None) -> list:
    """Snapshots for an adapter that already holds a flat ``{field: value}`` dict."""
    snapshots = []
    for field_name, value in values.items():
        snapshots.append(FieldSnapshot(
            object_id=normalize_object_id(object_id),
            object_type=object_type,
            field_name=field_name,
            value=value or '',
            context=context_for(field_name) if context_for else '',
        ))
    return snapshots
