from typing import Set

from tenantcms.errors import Conflict
from tenantcms.models.deployment import DeploymentStatus

PENDING = DeploymentStatus.PENDING.value
BUILDING = DeploymentStatus.BUILDING.value
SUCCESS = DeploymentStatus.SUCCESS.value
FAILED = DeploymentStatus.FAILED.value

TERMINAL_STATUSES: Set[str] = {SUCCESS, FAILED}

# PENDING → terminal covers a callback that arrives before the dispatcher
# has marked the build as started.
ALLOWED_DEPLOYMENT_TRANSITIONS: dict[str, Set[str]] = {
    PENDING: {BUILDING, SUCCESS, FAILED},
    BUILDING: {SUCCESS, FAILED},
    SUCCESS: set(),
    FAILED: set(),
}


def allowed_sources(to_status: str) -> Set[str]:
    """Statuses from which `to_status` may be entered."""
    return {
        source
        for source, targets in ALLOWED_DEPLOYMENT_TRANSITIONS.items()
        if to_status in targets
    }


def assert_deployment_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards deployment lifecycle transitions.
    Single source of truth for status changes.
    """
    allowed = ALLOWED_DEPLOYMENT_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise Conflict(
            f"Illegal deployment transition: {from_status} → {to_status}"
        )
