import os

import click
from flask.cli import with_appcontext

from .domain.content import encode_content
from .extensions import db
from .models.base import utc_now
from .models.page import Page, PageStatus
from .models.tenant import Tenant
from .models.user import Role, User
from .utils.api_keys import generate_api_key

DEMO_DOMAIN = "demo.localhost"

DEMO_PAGES = [
    {
        "slug": "about",
        "title": "About us",
        "description": "Learn more about our company",
        "html": "<h1>About us</h1><p>We are a demo company.</p>",
        "order": 1,
    },
    {
        "slug": "contact",
        "title": "Contact",
        "description": "Get in touch",
        "html": "<h1>Contact</h1><p>Email: contact@demo.localhost</p>",
        "order": 2,
    },
]


def seed_database():
    """Idempotently create the super admin, a demo tenant and demo pages."""
    email = os.getenv("ADMIN_EMAIL", "admin@localhost")
    password = os.getenv("ADMIN_PASSWORD", "admin123")

    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User()
        admin.email = email
        admin.name = "Super Admin"
        admin.role = Role.SUPER_ADMIN.value
        admin.tenant_id = None
        admin.is_active = True
        admin.set_password(password)
        db.session.add(admin)
        db.session.flush()

    tenant = Tenant.query.filter_by(domain=DEMO_DOMAIN).first()
    if tenant is None:
        tenant = Tenant()
        tenant.name = "Demo Site"
        tenant.slug = "demo"
        tenant.domain = DEMO_DOMAIN
        tenant.domains = []
        tenant.settings = {"primary_color": "#3b82f6", "description": "Demo site"}
        tenant.api_key = generate_api_key()
        tenant.is_active = True
        db.session.add(tenant)
        db.session.flush()

    pages = [("index", "Home", "Welcome to the demo site", "<h1>Welcome!</h1>", 0, "home")]
    pages += [(p["slug"], p["title"], p["description"], p["html"], p["order"], "default") for p in DEMO_PAGES]

    for slug, title, description, html, order, template in pages:
        if Page.query.filter_by(tenant_id=tenant.id, slug=slug).first():
            continue
        page = Page()
        page.tenant_id = tenant.id
        page.slug = slug
        page.title = title
        page.description = description
        page.content = encode_content({"html": html})
        page.seo = {}
        page.status = PageStatus.PUBLISHED.value
        page.template = template
        page.order = order
        page.author_id = admin.id
        page.published_at = utc_now()
        db.session.add(page)

    db.session.commit()
    return admin, tenant


def register_cli(app):
    @app.cli.command("seed")
    @with_appcontext
    def seed_command():
        """Create the super admin and demo content."""
        db.create_all()
        admin, tenant = seed_database()
        click.echo(f"Super admin: {admin.email}")
        click.echo(f"Demo tenant: {tenant.domain}")
        click.echo(f"Demo API key: {tenant.api_key}")
