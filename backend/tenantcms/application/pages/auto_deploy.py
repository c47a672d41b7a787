import logging
from typing import Optional

from flask import current_app

logger = logging.getLogger(__name__)


def maybe_auto_deploy(tenant_id: str, actor_id: Optional[str]):
    """Queue a rebuild after a change to published content, when enabled."""
    if not current_app.config.get("AUTO_DEPLOY_ON_PUBLISH"):
        return None

    manager = current_app.extensions["deployments"]
    deployment = manager.trigger_deploy(tenant_id, actor_id)
    logger.info("Auto-deploy %s queued for tenant %s", deployment.id, tenant_id)
    return deployment
