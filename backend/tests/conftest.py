"""
Pytest configuration and fixtures for tenantcms tests.

Every test gets a fresh application on an in-memory SQLite database. External
services are replaced by in-process fakes and builds run only when a test
calls `executor.run_all()`.
"""

from types import SimpleNamespace

import pytest

from tenantcms import create_app
from tenantcms.extensions import db
from tenantcms.models.page import Page
from tenantcms.models.tenant import Tenant
from tenantcms.models.user import Role, User
from tenantcms.services.build_dispatch import BuildDispatcher
from tenantcms.services.cdn import CacheInvalidator
from tenantcms.services.media_store import MediaStore
from tenantcms.domain.content import encode_content
from tenantcms.models.base import utc_now
from tenantcms.utils.api_keys import generate_api_key

DEFAULT_PASSWORD = "secret123"


class ManualExecutor:
    """Collects submitted builds; `run_all` runs them in the test thread."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args, **kwargs):
        self.jobs.append((fn, args, kwargs))

    def run_all(self):
        jobs, self.jobs = self.jobs, []
        for fn, args, kwargs in jobs:
            fn(*args, **kwargs)
        return len(jobs)

    def shutdown(self, wait=True):
        self.jobs = []


class FakeDispatcher(BuildDispatcher):
    """Records dispatches; raises `error` instead when one is set."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def dispatch(self, *, repo, deployment_id, reason):
        self.calls.append({"repo": repo, "deployment_id": deployment_id, "reason": reason})
        if self.error is not None:
            raise self.error


class FakeInvalidator(CacheInvalidator):
    def __init__(self):
        self.domains = []

    def invalidate(self, domain):
        self.domains.append(domain)
        return True


class MemoryMediaStore(MediaStore):
    base_url = "https://media.test"

    def __init__(self):
        self.objects = {}

    def put(self, key, body, content_type):
        self.objects[key] = (body, content_type)
        return f"{self.base_url}/{key}"

    def delete(self, key):
        return self.objects.pop(key, None) is not None

    def key_from_url(self, url):
        prefix = self.base_url + "/"
        return url[len(prefix):] if url.startswith(prefix) else None


@pytest.fixture
def executor():
    return ManualExecutor()


@pytest.fixture
def invalidator():
    return FakeInvalidator()


@pytest.fixture
def media_store():
    return MemoryMediaStore()


@pytest.fixture
def make_app(executor, invalidator, media_store):
    """Build a testing app; keyword arguments override config or fakes."""
    apps = []

    def _make(config_overrides=None, **services):
        services.setdefault("executor", executor)
        services.setdefault("invalidator", invalidator)
        services.setdefault("media_store", media_store)
        app = create_app("testing", config_overrides, **services)
        with app.app_context():
            db.create_all()
        apps.append(app)
        return app

    yield _make

    for app in apps:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def dispatcher(app):
    """Enable the CI path on `app` with a recording dispatcher."""
    fake = FakeDispatcher()
    app.extensions["deployments"].dispatcher = fake
    return fake


@pytest.fixture
def make_tenant(app):
    def _make(name="Acme", domain="acme.test", slug=None, is_active=True, github_repo=None):
        with app.app_context():
            tenant = Tenant()
            tenant.name = name
            tenant.slug = slug or name.lower().replace(" ", "-")
            tenant.domain = domain
            tenant.domains = []
            tenant.settings = {"primary_color": "#123456"}
            tenant.api_key = generate_api_key()
            tenant.is_active = is_active
            tenant.github_repo = github_repo
            db.session.add(tenant)
            db.session.commit()
            return SimpleNamespace(
                id=tenant.id,
                name=tenant.name,
                slug=tenant.slug,
                domain=tenant.domain,
                api_key=tenant.api_key,
            )

    return _make


@pytest.fixture
def make_user(app):
    def _make(email, role=Role.EDITOR.value, tenant_id=None, password=DEFAULT_PASSWORD, is_active=True, name=None):
        with app.app_context():
            user = User()
            user.email = email
            user.name = name or email.split("@")[0].title()
            user.role = role
            user.tenant_id = tenant_id
            user.is_active = is_active
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return SimpleNamespace(
                id=user.id,
                email=email,
                password=password,
                role=role,
                tenant_id=tenant_id,
            )

    return _make


@pytest.fixture
def make_page(app):
    """Insert a page directly, bypassing the API."""
    def _make(tenant_id, slug, title=None, status="PUBLISHED", order=0, parent_id=None,
              template="default", content=None, description=None, author_id=None):
        with app.app_context():
            page = Page()
            page.tenant_id = tenant_id
            page.slug = slug
            page.title = title or slug.title()
            page.status = status
            page.order = order
            page.parent_id = parent_id
            page.template = template
            page.description = description
            page.author_id = author_id
            page.content = content if isinstance(content, str) else encode_content(content or {})
            page.seo = {}
            if status == "PUBLISHED":
                page.published_at = utc_now()
            db.session.add(page)
            db.session.commit()
            return page.id

    return _make


@pytest.fixture
def login(app):
    """Return a test client carrying `user`'s session cookie."""
    def _login(user):
        client = app.test_client()
        response = client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": user.password},
        )
        assert response.status_code == 200, response.get_json()
        return client

    return _login


@pytest.fixture
def tenant(make_tenant):
    return make_tenant()


@pytest.fixture
def other_tenant(make_tenant):
    return make_tenant(name="Globex", domain="globex.test")


@pytest.fixture
def super_admin(make_user):
    return make_user("root@cms.io", role=Role.SUPER_ADMIN.value, tenant_id=None)


@pytest.fixture
def admin(make_user, tenant):
    return make_user("admin@acme.io", role=Role.ADMIN.value, tenant_id=tenant.id)


@pytest.fixture
def editor(make_user, tenant):
    return make_user("editor@acme.io", role=Role.EDITOR.value, tenant_id=tenant.id)


@pytest.fixture
def viewer(make_user, tenant):
    return make_user("viewer@acme.io", role=Role.VIEWER.value, tenant_id=tenant.id)


@pytest.fixture
def other_editor(make_user, other_tenant):
    return make_user("editor@globex.io", role=Role.EDITOR.value, tenant_id=other_tenant.id)
