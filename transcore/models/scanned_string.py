"""Scanned string model for translatable strings discovered in theme/plugin files."""
from datetime import datetime

from transcore import db


class ScannedString(db.Model):
    """A UI string found by the static scanner.

    ``object_id`` is derived from the text and domain (see
    ``scanned_string_id``) so a repeated scan lands on the same row. Its
    translation lives in ``translations`` under object_type ``'string'`` and
    field_name ``'text'``.
    """

    __tablename__ = 'scanned_strings'

    id = db.Column(db.Integer, primary_key=True)
    object_id = db.Column(db.String(64), nullable=False, unique=True)
    string_text = db.Column(db.Text, nullable=False)
    domain = db.Column(db.String(100), nullable=False, default='default', index=True)
    context = db.Column(db.String(255), default='')
    page_url = db.Column(db.String(500), default='')
    first_seen = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_seen = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def to_dict(self):
        """Convert scanned string to dictionary."""
        return {
            'id': self.id,
            'object_id': self.object_id,
            'string_text': self.string_text,
            'domain': self.domain,
            'context': self.context,
            'page_url': self.page_url,
            'first_seen': self.first_seen.isoformat() if self.first_seen else None,
            'last_seen': self.last_seen.isoformat() if self.last_seen else None,
        }

    def __repr__(self):
        return f'<ScannedString {self.object_id} ({self.domain})>'
