"""
Tests for the external service adapters (CI dispatch, CDN, media storage).
"""

import json

import httpx
import pytest
from botocore.exceptions import ClientError

from tenantcms.errors import ExternalDependencyError
from tenantcms.services.build_dispatch import GitHubActionsDispatcher, dispatcher_from_config
from tenantcms.services.cdn import CloudFrontInvalidator, NullInvalidator, invalidator_from_config
from tenantcms.services.media_store import (
    LocalMediaStore,
    S3MediaStore,
    media_store_from_config,
)


def client_error(operation):
    return ClientError({"Error": {"Code": "500", "Message": "boom"}}, operation)


class RecordingAwsClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def _record(self, operation, kwargs):
        self.calls.append((operation, kwargs))
        if self.fail:
            raise client_error(operation)
        return {}

    def put_object(self, **kwargs):
        return self._record("PutObject", kwargs)

    def delete_object(self, **kwargs):
        return self._record("DeleteObject", kwargs)

    def create_invalidation(self, **kwargs):
        return self._record("CreateInvalidation", kwargs)


class TestGitHubActionsDispatcher:
    def test_posts_workflow_dispatch(self):
        """The dispatch targets deploy.yml on main with reason and deployment id."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        dispatcher = GitHubActionsDispatcher("ghp_token", transport=httpx.MockTransport(handler))
        dispatcher.dispatch(repo="acme/site", deployment_id="d-1", reason="Deploy")

        request = seen[0]
        assert str(request.url) == "https://api.github.com/repos/acme/site/actions/workflows/deploy.yml/dispatches"
        assert request.headers["Authorization"] == "token ghp_token"
        assert json.loads(request.content) == {
            "ref": "main",
            "inputs": {"reason": "Deploy", "deployment_id": "d-1"},
        }

    def test_error_status_raises(self):
        """A 4xx/5xx from GitHub becomes an ExternalDependencyError."""
        transport = httpx.MockTransport(lambda request: httpx.Response(422, text="bad ref"))
        dispatcher = GitHubActionsDispatcher("t", transport=transport)

        with pytest.raises(ExternalDependencyError) as excinfo:
            dispatcher.dispatch(repo="acme/site", deployment_id="d-1", reason="r")
        assert excinfo.value.message == "GitHub API error: 422 - bad ref"

    def test_network_error_raises(self):
        """Transport failures become an ExternalDependencyError."""
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        dispatcher = GitHubActionsDispatcher("t", transport=httpx.MockTransport(handler))
        with pytest.raises(ExternalDependencyError):
            dispatcher.dispatch(repo="acme/site", deployment_id="d-1", reason="r")

    def test_from_config(self):
        """No token means no dispatcher."""
        assert dispatcher_from_config({"GITHUB_TOKEN": None}) is None
        dispatcher = dispatcher_from_config({"GITHUB_TOKEN": "t", "GITHUB_REF": "release"})
        assert isinstance(dispatcher, GitHubActionsDispatcher)
        assert dispatcher.ref == "release"


class TestCloudFrontInvalidator:
    def test_invalidates_domain_path(self):
        """The purge covers everything under the tenant's domain."""
        aws = RecordingAwsClient()
        assert CloudFrontInvalidator("DIST", "eu-central-1", client=aws).invalidate("acme.test") is True

        operation, kwargs = aws.calls[0]
        assert operation == "CreateInvalidation"
        assert kwargs["DistributionId"] == "DIST"
        assert kwargs["InvalidationBatch"]["Paths"] == {"Quantity": 1, "Items": ["/acme.test/*"]}
        assert kwargs["InvalidationBatch"]["CallerReference"].startswith("acme.test-")

    def test_failure_returns_false(self):
        """AWS errors are logged, not raised."""
        invalidator = CloudFrontInvalidator("DIST", "eu-central-1", client=RecordingAwsClient(fail=True))
        assert invalidator.invalidate("acme.test") is False

    def test_from_config(self):
        """Without a distribution id invalidation is a no-op."""
        assert isinstance(invalidator_from_config({}), NullInvalidator)
        assert NullInvalidator().invalidate("acme.test") is False
        assert isinstance(
            invalidator_from_config({"CLOUDFRONT_DISTRIBUTION_ID": "DIST"}), CloudFrontInvalidator
        )


class TestS3MediaStore:
    def test_put_returns_bucket_url(self):
        """Objects are written with a long-lived cache header."""
        aws = RecordingAwsClient()
        store = S3MediaStore("cms-media", "eu-central-1", client=aws)

        url = store.put("t1/a.png", b"x", "image/png")
        assert url == "https://cms-media.s3.eu-central-1.amazonaws.com/t1/a.png"
        assert store.key_from_url(url) == "t1/a.png"

        _, kwargs = aws.calls[0]
        assert kwargs["Bucket"] == "cms-media"
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["CacheControl"] == "public, max-age=31536000"

    def test_put_failure(self):
        """S3 errors surface as an upload failure."""
        store = S3MediaStore("cms-media", "eu-central-1", client=RecordingAwsClient(fail=True))
        with pytest.raises(ExternalDependencyError) as excinfo:
            store.put("t1/a.png", b"x", "image/png")
        assert excinfo.value.message == "Upload failed"


class TestLocalMediaStore:
    def test_put_and_delete(self, tmp_path):
        """Files are written below the root and served under /media."""
        store = LocalMediaStore(str(tmp_path))

        url = store.put("t1/a.png", b"data", "image/png")
        assert url == "/media/t1/a.png"
        assert (tmp_path / "t1" / "a.png").read_bytes() == b"data"

        key = store.key_from_url(url)
        assert store.delete(key) is True
        assert store.delete(key) is False

    def test_rejects_escaping_keys(self, tmp_path):
        """Keys may not climb out of the media root."""
        store = LocalMediaStore(str(tmp_path))
        with pytest.raises(ValueError):
            store.put("../outside.png", b"x", "image/png")

    def test_from_config(self, tmp_path):
        """A bucket selects S3, otherwise the local folder."""
        assert isinstance(media_store_from_config({"S3_MEDIA_BUCKET": "b"}), S3MediaStore)
        assert isinstance(media_store_from_config({"UPLOAD_FOLDER": str(tmp_path)}), LocalMediaStore)
