"""
Tests for page management through the admin API.
"""

import json

from tenantcms.extensions import db
from tenantcms.models.audit_log import AuditLog
from tenantcms.models.deployment import Deployment
from tenantcms.models.page import Page


def page_body(tenant_id, **overrides):
    body = {"tenant_id": tenant_id, "title": "About", "slug": "about"}
    body.update(overrides)
    return body


class TestCreatePage:
    def test_editor_creates_draft(self, login, editor, tenant):
        """New pages default to DRAFT with the default template."""
        response = login(editor).post("/api/v1/pages", json=page_body(tenant.id))

        assert response.status_code == 201
        page = response.get_json()["page"]
        assert page["status"] == "DRAFT"
        assert page["template"] == "default"
        assert page["published_at"] is None
        assert page["author_id"] == editor.id

    def test_published_on_create_stamps_published_at(self, login, editor, tenant):
        """Creating a page as PUBLISHED sets published_at."""
        response = login(editor).post(
            "/api/v1/pages", json=page_body(tenant.id, status="PUBLISHED")
        )
        assert response.get_json()["page"]["published_at"] is not None

    def test_slug_unique_per_tenant(self, login, editor, tenant):
        """The same slug twice in one tenant is a 409."""
        client = login(editor)
        assert client.post("/api/v1/pages", json=page_body(tenant.id)).status_code == 201

        response = client.post("/api/v1/pages", json=page_body(tenant.id, title="Other"))
        assert response.status_code == 409

    def test_same_slug_in_other_tenant(self, login, editor, other_editor, tenant, other_tenant):
        """Slugs are scoped to their tenant."""
        assert login(editor).post("/api/v1/pages", json=page_body(tenant.id)).status_code == 201
        assert login(other_editor).post("/api/v1/pages", json=page_body(other_tenant.id)).status_code == 201

    def test_viewer_cannot_create(self, login, viewer, tenant):
        """VIEWER is read-only."""
        assert login(viewer).post("/api/v1/pages", json=page_body(tenant.id)).status_code == 403

    def test_cannot_create_in_other_tenant(self, login, editor, other_tenant):
        """An explicit foreign tenant_id is forbidden."""
        response = login(editor).post("/api/v1/pages", json=page_body(other_tenant.id))
        assert response.status_code == 403

    def test_missing_title_rejected(self, login, editor, tenant):
        """title is required."""
        response = login(editor).post("/api/v1/pages", json={"tenant_id": tenant.id, "slug": "x"})
        assert response.status_code == 400
        assert response.get_json()["error"].startswith("title")

    def test_pre_encoded_content_is_stored_once(self, app, login, editor, tenant):
        """Content sent as a JSON string is stored as a single-encoded document."""
        content = json.dumps({"html": "<p>Hi</p>"})
        response = login(editor).post("/api/v1/pages", json=page_body(tenant.id, content=content))
        page_id = response.get_json()["page"]["id"]

        assert response.get_json()["page"]["content"] == {"html": "<p>Hi</p>"}
        with app.app_context():
            assert json.loads(db.session.get(Page, page_id).content) == {"html": "<p>Hi</p>"}

    def test_unknown_parent_rejected(self, login, editor, tenant):
        """parent_id must reference an existing page."""
        response = login(editor).post(
            "/api/v1/pages", json=page_body(tenant.id, parent_id="missing")
        )
        assert response.status_code == 400

    def test_parent_from_other_tenant_rejected(self, login, editor, tenant, other_tenant, make_page):
        """A page cannot hang under another tenant's page."""
        foreign = make_page(other_tenant.id, "foreign")
        response = login(editor).post(
            "/api/v1/pages", json=page_body(tenant.id, parent_id=foreign)
        )
        assert response.status_code == 400


class TestReadPages:
    def test_list_ordered_by_order_then_title(self, login, editor, tenant, make_page):
        """The admin list sorts by order, then title."""
        make_page(tenant.id, "c", title="Charlie", order=1)
        make_page(tenant.id, "b", title="Bravo", order=1)
        make_page(tenant.id, "a", title="Alpha", order=2)

        pages = login(editor).get("/api/v1/pages").get_json()["pages"]
        assert [p["title"] for p in pages] == ["Bravo", "Charlie", "Alpha"]

    def test_list_filters(self, login, editor, tenant, make_page):
        """status and template narrow the list."""
        make_page(tenant.id, "draft", status="DRAFT")
        make_page(tenant.id, "news-1", template="news")

        client = login(editor)
        drafts = client.get("/api/v1/pages?status=DRAFT").get_json()["pages"]
        news = client.get("/api/v1/pages?template=news").get_json()["pages"]

        assert [p["slug"] for p in drafts] == ["draft"]
        assert [p["slug"] for p in news] == ["news-1"]

    def test_list_other_tenant_forbidden(self, login, editor, other_tenant):
        """Listing another tenant's pages is a 403."""
        response = login(editor).get(f"/api/v1/pages?tenant_id={other_tenant.id}")
        assert response.status_code == 403

    def test_super_admin_needs_tenant(self, login, super_admin):
        """SUPER_ADMIN has no home tenant and must name one."""
        assert login(super_admin).get("/api/v1/pages").status_code == 400

    def test_other_tenant_page_not_found(self, login, editor, other_tenant, make_page):
        """A foreign page looks exactly like a missing one."""
        page_id = make_page(other_tenant.id, "secret")
        client = login(editor)

        foreign = client.get(f"/api/v1/pages/{page_id}")
        missing = client.get("/api/v1/pages/does-not-exist")
        assert foreign.status_code == missing.status_code == 404
        assert foreign.get_json() == missing.get_json()

    def test_viewer_can_read(self, login, viewer, tenant, make_page):
        """VIEWER reads pages of their tenant."""
        page_id = make_page(tenant.id, "about")
        assert login(viewer).get(f"/api/v1/pages/{page_id}").status_code == 200


class TestUpdatePage:
    def test_publish_stamps_published_at_once(self, app, login, editor, tenant, make_page):
        """published_at is set on the move into PUBLISHED and kept afterwards."""
        page_id = make_page(tenant.id, "about", status="DRAFT")
        client = login(editor)

        first = client.put(f"/api/v1/pages/{page_id}", json={"status": "PUBLISHED"}).get_json()["page"]
        assert first["published_at"] is not None

        second = client.put(f"/api/v1/pages/{page_id}", json={"title": "About us"}).get_json()["page"]
        assert second["published_at"] == first["published_at"]
        assert second["title"] == "About us"

    def test_unpublish_keeps_published_at(self, login, editor, tenant, make_page):
        """Archiving does not clear published_at."""
        page_id = make_page(tenant.id, "about")
        page = login(editor).put(f"/api/v1/pages/{page_id}", json={"status": "ARCHIVED"}).get_json()["page"]
        assert page["status"] == "ARCHIVED"
        assert page["published_at"] is not None

    def test_empty_update_rejected(self, login, editor, tenant, make_page):
        """An update with no fields is a 400."""
        page_id = make_page(tenant.id, "about")
        response = login(editor).put(f"/api/v1/pages/{page_id}", json={})
        assert response.status_code == 400

    def test_slug_conflict(self, login, editor, tenant, make_page):
        """Renaming onto an existing slug is a 409."""
        make_page(tenant.id, "about")
        page_id = make_page(tenant.id, "contact")
        response = login(editor).put(f"/api/v1/pages/{page_id}", json={"slug": "about"})
        assert response.status_code == 409

    def test_keeping_own_slug_is_fine(self, login, editor, tenant, make_page):
        """Sending the page's current slug is not a conflict."""
        page_id = make_page(tenant.id, "about")
        response = login(editor).put(f"/api/v1/pages/{page_id}", json={"slug": "about", "order": 3})
        assert response.status_code == 200
        assert response.get_json()["page"]["order"] == 3

    def test_cycle_rejected(self, login, editor, tenant, make_page):
        """A page cannot be moved under its own descendant."""
        root = make_page(tenant.id, "root")
        child = make_page(tenant.id, "child", parent_id=root)
        grandchild = make_page(tenant.id, "grandchild", parent_id=child)
        client = login(editor)

        assert client.put(f"/api/v1/pages/{root}", json={"parent_id": grandchild}).status_code == 400
        assert client.put(f"/api/v1/pages/{root}", json={"parent_id": root}).status_code == 400

    def test_move_to_top_level(self, login, editor, tenant, make_page):
        """parent_id null detaches a page."""
        root = make_page(tenant.id, "root")
        child = make_page(tenant.id, "child", parent_id=root)
        page = login(editor).put(f"/api/v1/pages/{child}", json={"parent_id": None}).get_json()["page"]
        assert page["parent_id"] is None

    def test_stale_write_conflicts(self, login, editor, tenant, make_page):
        """An If-Unmodified-Since older than the row is a 409."""
        page_id = make_page(tenant.id, "about")
        response = login(editor).put(
            f"/api/v1/pages/{page_id}",
            json={"title": "Late"},
            headers={"If-Unmodified-Since": "Mon, 01 Jan 2001 00:00:00 GMT"},
        )
        assert response.status_code == 409

    def test_fresh_write_applies(self, login, editor, tenant, make_page):
        """An If-Unmodified-Since in the future lets the write through."""
        page_id = make_page(tenant.id, "about")
        response = login(editor).put(
            f"/api/v1/pages/{page_id}",
            json={"title": "On time"},
            headers={"If-Unmodified-Since": "Fri, 01 Jan 2100 00:00:00 GMT"},
        )
        assert response.status_code == 200

    def test_other_tenant_page_not_found(self, login, editor, other_tenant, make_page):
        """Updating a foreign page is a 404."""
        page_id = make_page(other_tenant.id, "about")
        response = login(editor).put(f"/api/v1/pages/{page_id}", json={"title": "Mine"})
        assert response.status_code == 404

    def test_super_admin_edits_any_tenant(self, login, super_admin, other_tenant, make_page):
        """SUPER_ADMIN is not bound to a tenant."""
        page_id = make_page(other_tenant.id, "about")
        response = login(super_admin).put(f"/api/v1/pages/{page_id}", json={"title": "Edited"})
        assert response.status_code == 200

    def test_viewer_cannot_update(self, login, viewer, tenant, make_page):
        """VIEWER cannot edit."""
        page_id = make_page(tenant.id, "about")
        assert login(viewer).put(f"/api/v1/pages/{page_id}", json={"title": "X"}).status_code == 403

    def test_update_is_audited(self, app, login, editor, tenant, make_page):
        """page.update records the changed fields and the actor."""
        page_id = make_page(tenant.id, "about")
        login(editor).put(f"/api/v1/pages/{page_id}", json={"title": "New", "order": 2})

        with app.app_context():
            log = AuditLog.query.filter_by(entity_id=page_id, action="page.update").one()
            assert log.actor_id == editor.id
            assert log.payload == {"fields": ["order", "title"]}


class TestDeletePage:
    def test_children_move_to_top_level(self, app, login, editor, tenant, make_page):
        """Deleting a parent keeps its children at the top level."""
        root = make_page(tenant.id, "root")
        child = make_page(tenant.id, "child", parent_id=root)

        response = login(editor).delete(f"/api/v1/pages/{root}")
        assert response.status_code == 200

        with app.app_context():
            assert db.session.get(Page, root) is None
            assert db.session.get(Page, child).parent_id is None

    def test_other_tenant_delete_not_found(self, app, login, editor, other_tenant, make_page):
        """A foreign page cannot be deleted and stays in place."""
        page_id = make_page(other_tenant.id, "about")
        assert login(editor).delete(f"/api/v1/pages/{page_id}").status_code == 404

        with app.app_context():
            assert db.session.get(Page, page_id) is not None


class TestAutoDeploy:
    def test_publishing_queues_deployment(self, app, login, editor, tenant, executor):
        """With auto-deploy on, publishing a page queues a build; drafts do not."""
        app.config["AUTO_DEPLOY_ON_PUBLISH"] = True
        client = login(editor)

        draft = client.post("/api/v1/pages", json=page_body(tenant.id))
        assert draft.status_code == 201
        assert executor.jobs == []

        page_id = draft.get_json()["page"]["id"]
        client.put(f"/api/v1/pages/{page_id}", json={"status": "PUBLISHED"})
        assert len(executor.jobs) == 1

        with app.app_context():
            assert Deployment.query.filter_by(tenant_id=tenant.id).count() == 1

    def test_disabled_by_default(self, login, editor, tenant, executor):
        """Without the flag, publishing does not queue anything."""
        login(editor).post("/api/v1/pages", json=page_body(tenant.id, status="PUBLISHED"))
        assert executor.jobs == []
