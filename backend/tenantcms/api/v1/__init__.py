from flask import Blueprint

# Create the versioned blueprint
v1_bp = Blueprint("v1", __name__)

# Import route modules so they register with v1_bp
from . import health
from . import auth
from . import tenants
from . import pages
from . import users
from . import deploy
from . import upload
from . import audit
from .public import public_bp

v1_bp.register_blueprint(public_bp, url_prefix="/public")
