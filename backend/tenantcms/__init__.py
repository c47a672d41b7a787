from flask import Flask, send_file, send_from_directory, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .errors import register_error_handlers
from .logging_setup import configure_logging
from .services.build_dispatch import dispatcher_from_config
from .services.cdn import invalidator_from_config
from .services.deployments import DeploymentManager
from .services.media_store import LocalMediaStore, media_store_from_config
from .cli import register_cli
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(
    config_name: str = "development",
    config_overrides=None,
    *,
    dispatcher=None,
    invalidator=None,
    media_store=None,
    executor=None,
) -> Flask:
    """
    Application factory.

    External services (CI dispatcher, CDN invalidator, media store, build
    executor) are built from configuration unless passed in explicitly.
    """
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # -------------------------------------------------
    # Services
    # -------------------------------------------------
    app.extensions["deployments"] = DeploymentManager(
        app,
        dispatcher=dispatcher or dispatcher_from_config(app.config),
        invalidator=invalidator or invalidator_from_config(app.config),
        executor=executor,
    )
    store = media_store or media_store_from_config(app.config)
    app.extensions["media_store"] = store

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_cli(app)

    # -------------------------------------------------
    # Local media (only when no object store is configured)
    # -------------------------------------------------
    if isinstance(store, LocalMediaStore):
        @app.route("/media/<path:key>", methods=["GET"], endpoint="local_media")
        def serve_media(key):
            return send_from_directory(store.root, key, max_age=31536000)

    # -------------------------------------------------
    # Serve OpenAPI YAML
    # -------------------------------------------------
    @app.route("/openapi/cms.yaml", methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "cms_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("cms_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/cms.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Tenant CMS API",
            "deepLinking": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    app.logger.info("tenantcms started with %s config", config_name)
    return app
