from datetime import datetime, timezone
from donorapp.extensions import db


class KVEntry(db.Model):
    __tablename__ = 'kv_store'

    key = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.JSON, nullable=False)
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<KVEntry {self.key}>'
