"""
Remote build trigger.

The deployment pipeline only needs "given a repository and a ref, start a
remote build"; `GitHubActionsDispatcher` does that through the GitHub
``workflow_dispatch`` API.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from tenantcms.errors import ExternalDependencyError

logger = logging.getLogger(__name__)


class BuildDispatcher(ABC):
    @abstractmethod
    def dispatch(self, *, repo: str, deployment_id: str, reason: str) -> None:
        """Start a build; raise `ExternalDependencyError` if it could not be started."""


class GitHubActionsDispatcher(BuildDispatcher):
    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://api.github.com",
        workflow: str = "deploy.yml",
        ref: str = "main",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.workflow = workflow
        self.ref = ref
        self.timeout = timeout
        self.transport = transport

    def dispatch_url(self, repo: str) -> str:
        return f"{self.api_url}/repos/{repo}/actions/workflows/{self.workflow}/dispatches"

    def dispatch(self, *, repo, deployment_id, reason):
        url = self.dispatch_url(repo)
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "Authorization": f"token {self.token}",
        }
        payload = {
            "ref": self.ref,
            "inputs": {"reason": reason, "deployment_id": deployment_id},
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ExternalDependencyError(f"GitHub Actions request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ExternalDependencyError(
                f"GitHub API error: {response.status_code} - {response.text[:500]}"
            )

        logger.info("Dispatched %s on %s@%s for deployment %s", self.workflow, repo, self.ref, deployment_id)


def dispatcher_from_config(config) -> Optional[BuildDispatcher]:
    token = config.get("GITHUB_TOKEN")
    if not token:
        return None
    return GitHubActionsDispatcher(
        token,
        api_url=config.get("GITHUB_API_URL") or "https://api.github.com",
        workflow=config.get("GITHUB_WORKFLOW") or "deploy.yml",
        ref=config.get("GITHUB_REF") or "main",
    )
