"""
Deployment orchestration.

`DeploymentManager` owns the build lifecycle for every tenant:

- `trigger_deploy` records a PENDING deployment and hands the build to a
  background executor; the caller never waits for the build.
- The worker either dispatches a remote CI run (BUILDING, later resolved by
  the CI callback) or, with no CI configured, simulates a short build that
  ends in SUCCESS.
- `handle_build_callback` applies the CI's terminal verdict.

Status changes go through `_transition`, a guarded
``UPDATE ... WHERE status IN (<legal sources>)``. A writer that lost a race
updates zero rows and backs off, so a deployment can never move backwards or
leave a terminal state, and the SUCCESS side effect (CDN invalidation) fires
exactly once.
"""
from __future__ import annotations

import hmac
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from flask import current_app
from sqlalchemy import update

from tenantcms.domain.lifecycle.deployment import (
    BUILDING,
    FAILED,
    PENDING,
    SUCCESS,
    TERMINAL_STATUSES,
    allowed_sources,
    assert_deployment_transition,
)
from tenantcms.errors import ExternalDependencyError, NotFound, Unauthenticated, ValidationError
from tenantcms.extensions import db
from tenantcms.models.base import utc_now
from tenantcms.models.deployment import Deployment
from tenantcms.models.tenant import Tenant
from tenantcms.services.build_dispatch import BuildDispatcher
from tenantcms.services.cdn import CacheInvalidator, NullInvalidator
from tenantcms.utils.audit import log_action

logger = logging.getLogger(__name__)

SIMULATED_BUILD_LOG = (
    "Development mode - simulated build success.\n\n"
    "To enable real deployments, configure:\n"
    "- GITHUB_TOKEN\n"
    "- GITHUB_REPO (or the tenant's github_repo)"
)


def verify_webhook_secret(provided: Optional[str]) -> None:
    """Constant-time check of the CI callback's shared secret."""
    expected = current_app.config.get("WEBHOOK_SECRET")
    if not expected:
        logger.error("Build callback rejected: WEBHOOK_SECRET is not configured")
        raise Unauthenticated("Invalid webhook secret")
    if not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning("Build callback rejected: invalid webhook secret")
        raise Unauthenticated("Invalid webhook secret")


class DeploymentManager:
    def __init__(
        self,
        app,
        *,
        dispatcher: Optional[BuildDispatcher] = None,
        invalidator: Optional[CacheInvalidator] = None,
        executor=None,
    ):
        self.app = app
        self.dispatcher = dispatcher
        self.invalidator = invalidator or NullInvalidator()
        self._executor = executor or ThreadPoolExecutor(
            max_workers=app.config.get("DEPLOY_WORKERS", 2),
            thread_name_prefix="deploy",
        )

    # -------------------------------------------------
    # Public operations
    # -------------------------------------------------
    def trigger_deploy(self, tenant_id: str, triggered_by: Optional[str] = None) -> Deployment:
        tenant = db.session.get(Tenant, tenant_id)
        if tenant is None:
            raise NotFound("Tenant not found")

        deployment = Deployment()
        deployment.tenant_id = tenant.id
        deployment.status = PENDING
        deployment.triggered_by = triggered_by

        db.session.add(deployment)
        db.session.flush()
        log_action(
            tenant_id=tenant.id,
            action="deploy.trigger",
            entity_type="deployment",
            entity_id=deployment.id,
            actor_id=triggered_by,
        )
        db.session.commit()

        logger.info("Deployment %s queued for tenant %s", deployment.id, tenant.slug)
        self._executor.submit(self._run_build, deployment.id, triggered_by)
        return deployment

    def handle_build_callback(
        self,
        deployment_id: str,
        status: str,
        build_log: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> Deployment:
        if status not in TERMINAL_STATUSES:
            raise ValidationError("status: must be SUCCESS or FAILED")

        deployment = db.session.get(Deployment, deployment_id)
        if deployment is None:
            raise NotFound("Deployment not found")

        assert_deployment_transition(from_status=deployment.status, to_status=status)

        if not self._transition(deployment_id, status, build_log=build_log, duration=duration):
            db.session.refresh(deployment)
            assert_deployment_transition(from_status=deployment.status, to_status=status)

        logger.info("Deployment %s callback applied: %s", deployment_id, status)
        return db.session.get(Deployment, deployment_id)

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    # -------------------------------------------------
    # Background build
    # -------------------------------------------------
    def _run_build(self, deployment_id: str, triggered_by: Optional[str]):
        with self.app.app_context():
            try:
                self._build(deployment_id, triggered_by)
            except Exception as exc:
                logger.exception("Build worker crashed for deployment %s", deployment_id)
                db.session.rollback()
                self._transition(deployment_id, FAILED, build_log=f"Build worker error: {exc}")

    def _build(self, deployment_id: str, triggered_by: Optional[str]):
        deployment = db.session.get(Deployment, deployment_id)
        if deployment is None:
            logger.warning("Deployment %s vanished before its build started", deployment_id)
            return

        tenant = deployment.tenant
        repo = tenant.github_repo or self.app.config.get("GITHUB_REPO")

        if self.dispatcher is None or not repo:
            logger.info("No CI configured for %s, simulating build", tenant.domain)
            self._simulate(deployment_id)
            return

        if not self._transition(deployment_id, BUILDING):
            return

        reason = f"Deploy triggered by {triggered_by or 'CMS'} for {tenant.domain}"
        try:
            self.dispatcher.dispatch(repo=repo, deployment_id=deployment_id, reason=reason)
        except ExternalDependencyError as exc:
            logger.error("Dispatch for deployment %s failed: %s", deployment_id, exc.message)
            self._transition(deployment_id, FAILED, build_log=f"GitHub Actions error: {exc.message}")

    def _simulate(self, deployment_id: str):
        if not self._transition(deployment_id, BUILDING):
            return

        seconds = float(self.app.config.get("SIMULATED_BUILD_SECONDS", 2))
        if seconds > 0:
            time.sleep(seconds)

        self._transition(
            deployment_id,
            SUCCESS,
            build_log=SIMULATED_BUILD_LOG,
            duration=int(round(seconds)),
        )

    # -------------------------------------------------
    # State changes
    # -------------------------------------------------
    def _transition(self, deployment_id: str, to_status: str, **fields) -> bool:
        """Apply `to_status` if the row is still in a legal source state."""
        now = utc_now()
        values = {"status": to_status, "updated_at": now}
        values.update({key: value for key, value in fields.items() if value is not None})
        if to_status in TERMINAL_STATUSES:
            values["finished_at"] = now

        result = db.session.execute(
            update(Deployment)
            .where(
                Deployment.id == deployment_id,
                Deployment.status.in_(sorted(allowed_sources(to_status))),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        db.session.commit()

        if result.rowcount != 1:
            logger.warning("Deployment %s: transition to %s not applied", deployment_id, to_status)
            return False

        logger.info("Deployment %s -> %s", deployment_id, to_status)
        if to_status == SUCCESS:
            self._on_success(deployment_id)
        return True

    def _on_success(self, deployment_id: str):
        deployment = db.session.get(Deployment, deployment_id)
        domain = deployment.tenant.domain
        try:
            self.invalidator.invalidate(domain)
        except Exception:
            # a failed purge leaves the deployment SUCCESS
            logger.exception("Cache invalidation for %s failed", domain)
