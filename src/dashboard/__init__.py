import logging

from flask import Flask, redirect, url_for
from flask_caching import Cache
from flask_sqlalchemy import SQLAlchemy
from flask_smorest import Api
from dotenv import load_dotenv

db = SQLAlchemy()
cache = Cache()

def create_app(config_object=None):
    load_dotenv() # Load environment variables from .env file
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_object(config_object or 'src.dashboard.config.config.Config')

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    db.init_app(app)
    cache.init_app(app)
    api = Api(app)

    from src.dashboard.services.cache import PageCache
    app.extensions["page_cache"] = PageCache(cache)

    # Import and register blueprints
    from src.dashboard.routes.auth_routes import blp as AuthBlueprint
    from src.dashboard.routes.dashboard_routes import blp as DashboardBlueprint
    from src.dashboard.routes.invoice_routes import blp as InvoiceBlueprint
    from src.dashboard.routes.customer_routes import blp as CustomerBlueprint
    from src.dashboard.routes.seed_routes import blp as SeedBlueprint
    api.register_blueprint(AuthBlueprint)
    api.register_blueprint(DashboardBlueprint)
    api.register_blueprint(InvoiceBlueprint)
    api.register_blueprint(CustomerBlueprint)
    api.register_blueprint(SeedBlueprint)

    from src.dashboard.services.seed_service import register_commands
    register_commands(app)

    # Create database tables within the app context
    # This ensures models are registered correctly before creation
    with app.app_context():
        from src.dashboard.models import models  # noqa: F401
        db.create_all()

    @app.route('/')
    def index():
        return redirect(url_for('api-docs.openapi_swagger_ui'))

    return app
