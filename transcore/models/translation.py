"""Translation model: one translated field of one content object in one language."""
from datetime import datetime

from transcore import db


class ObjectType:
    """Known object types. The store accepts any non-empty string."""
    POST = 'post'
    TERM = 'term'
    ATTACHMENT = 'attachment'
    OPTION = 'option'
    WIDGET = 'widget'
    MENU_ITEM = 'menu_item'
    BLOCK_ITEM = 'block_item'
    WC_ATTRIBUTE = 'wc_attribute'
    CF7_FORM = 'cf7_form'
    CF7_MAIL = 'cf7_mail'
    CF7_MESSAGE = 'cf7_message'
    ELEMENTOR = 'elementor'
    DIVI = 'divi'
    AVADA = 'avada'
    STRING = 'string'


class Translation(db.Model):
    """Translated content for a single (object, field, language).

    ``original_hash`` is the fingerprint of ``original_content`` at the time
    the translation was saved; comparing it with the fingerprint of the live
    source value tells whether the translation went stale.
    """

    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    object_id = db.Column(db.String(64), nullable=False)
    object_type = db.Column(db.String(50), nullable=False)
    field_name = db.Column(db.String(100), nullable=False)
    language_code = db.Column(db.String(10), nullable=False, index=True)
    original_content = db.Column(db.Text, nullable=True)
    original_hash = db.Column(db.String(32), nullable=True, index=True)
    translated_content = db.Column(db.Text, nullable=True)
    is_auto_translated = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('object_id', 'object_type', 'field_name', 'language_code',
                            name='unique_translation'),
        db.Index('idx_translation_object', 'object_id', 'object_type', 'language_code'),
    )

    @property
    def key(self):
        return (self.object_id, self.object_type, self.field_name)

    @property
    def has_translation(self):
        return bool(self.translated_content)

    def to_dict(self):
        """Convert translation to dictionary."""
        return {
            'id': self.id,
            'object_id': self.object_id,
            'object_type': self.object_type,
            'field_name': self.field_name,
            'language_code': self.language_code,
            'original_content': self.original_content,
            'original_hash': self.original_hash,
            'translated_content': self.translated_content,
            'is_auto_translated': self.is_auto_translated,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return (f'<Translation {self.object_type}:{self.object_id}:'
                f'{self.field_name} [{self.language_code}]>')
