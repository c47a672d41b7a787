from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError

from tenantcms.errors import Conflict
from tenantcms.extensions import db


@contextmanager
def transactional(conflict_message=None):
    """
    Commit on success, roll back on any error.

    A unique-constraint violation raised by the commit itself (two writers
    racing past the pre-check) is surfaced as `Conflict`.
    """
    try:
        yield
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict(conflict_message) from exc
    except Exception:
        db.session.rollback()
        raise
