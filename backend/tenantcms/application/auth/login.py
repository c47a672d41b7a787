import logging

from tenantcms.errors import Unauthenticated
from tenantcms.extensions import db
from tenantcms.models.base import utc_now
from tenantcms.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def login(*, email: str, password: str) -> User:
    """
    Check credentials and stamp `last_login_at`.

    Unknown email, inactive account and wrong password are reported with the
    same message so the response does not reveal which accounts exist.
    """
    user = User.query.filter_by(email=email).first()

    if user is None or not user.is_active or not user.check_password(password):
        logger.warning("Failed login for %s", email)
        raise Unauthenticated(INVALID_CREDENTIALS)

    user.last_login_at = utc_now()
    db.session.commit()

    logger.info("User %s logged in", user.id)
    return user
