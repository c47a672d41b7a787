from datetime import datetime, timezone
import uuid
from tenantcms.extensions import db


def utc_now():
    return datetime.now(timezone.utc)


def new_id():
    return str(uuid.uuid4())


class BaseModel(db.Model):
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_id, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now, index=True)

    def touch(self):
        """Stamp updated_at even when no column value changed."""
        self.updated_at = utc_now()

    def __repr__(self):
        return f"<{type(self).__name__} {self.id}>"
