from .tenant import Tenant
from .page import Page, PageStatus, NEWS_TEMPLATE
from .user import User, Role
from .deployment import Deployment, DeploymentStatus
from .audit_log import AuditLog

__all__ = [
    "Tenant",
    "Page",
    "PageStatus",
    "NEWS_TEMPLATE",
    "User",
    "Role",
    "Deployment",
    "DeploymentStatus",
    "AuditLog",
]
