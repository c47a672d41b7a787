"""
Tests for the audit trail.
"""

import pytest

from tenantcms.extensions import db
from tenantcms.models.audit_log import AuditLog


def create_page(client, tenant_id, slug):
    response = client.post("/api/v1/pages", json={"tenant_id": tenant_id, "title": slug.title(), "slug": slug})
    assert response.status_code == 201
    return response.get_json()["page"]["id"]


class TestAuditEndpoint:
    def test_admin_reads_trail_newest_first(self, login, admin, editor, tenant):
        """Mutations by tenant users are listed newest first with their actor."""
        editor_client = login(editor)
        first = create_page(editor_client, tenant.id, "one")
        second = create_page(editor_client, tenant.id, "two")

        body = login(admin).get("/api/v1/audit?action=page.create").get_json()
        assert [item["entity_id"] for item in body["items"]] == [second, first]
        assert all(item["actor_id"] == editor.id for item in body["items"])
        assert body["pagination"]["has_more"] is False

    def test_filters(self, login, admin, editor, tenant):
        """entity_id narrows the trail to one record."""
        editor_client = login(editor)
        page_id = create_page(editor_client, tenant.id, "one")
        editor_client.put(f"/api/v1/pages/{page_id}", json={"title": "Uno"})
        create_page(editor_client, tenant.id, "two")

        items = login(admin).get(f"/api/v1/audit?entity_id={page_id}").get_json()["items"]
        assert [item["action"] for item in items] == ["page.update", "page.create"]

    def test_editor_forbidden(self, login, editor):
        """Only user managers read the trail."""
        assert login(editor).get("/api/v1/audit").status_code == 403

    def test_other_tenant_forbidden(self, login, admin, other_tenant):
        """ADMIN cannot read another tenant's trail."""
        assert login(admin).get(f"/api/v1/audit?tenant_id={other_tenant.id}").status_code == 403

    def test_super_admin_needs_tenant(self, login, super_admin):
        """SUPER_ADMIN must name the tenant."""
        assert login(super_admin).get("/api/v1/audit").status_code == 400


class TestImmutability:
    def test_rows_cannot_be_changed(self, app, login, editor, tenant):
        """Audit rows reject updates and deletes."""
        create_page(login(editor), tenant.id, "one")

        with app.app_context():
            log = AuditLog.query.first()
            log.action = "tampered"
            with pytest.raises(RuntimeError):
                db.session.flush()
            db.session.rollback()

            log = AuditLog.query.first()
            db.session.delete(log)
            with pytest.raises(RuntimeError):
                db.session.flush()
            db.session.rollback()
