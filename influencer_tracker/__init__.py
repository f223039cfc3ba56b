"""
Flask application factory.

Creates and configures the Flask app, builds the scraper registry and
registers all blueprints.
"""
import importlib

from flask import Flask


def create_app(registry=None):
    """Create and configure the Flask application."""
    from influencer_tracker.logging_config import configure_logging
    from influencer_tracker.scrapers.registry import ScraperRegistry

    app = Flask(__name__)

    configure_logging(app)

    # Provider callbacks can carry large post batches
    app.config['MAX_CONTENT_LENGTH'] = 5 * 1024 * 1024

    # One scraper registry per process, shared by everything the app calls
    app.extensions['scraper_registry'] = registry or ScraperRegistry()

    # Register blueprints
    from influencer_tracker.routes.health import bp as health_bp
    from influencer_tracker.routes.webhook import bp as webhook_bp
    from influencer_tracker.routes.influencers import bp as influencers_bp
    from influencer_tracker.routes.scrap_jobs import bp as scrap_jobs_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(webhook_bp)
    app.register_blueprint(influencers_bp)
    app.register_blueprint(scrap_jobs_bp)

    # Import models so Base.metadata knows about them (required for SQLAlchemy).
    # Schema is managed by Alembic, so there is no create_all() call here.
    importlib.import_module('influencer_tracker.models.influencer')
    importlib.import_module('influencer_tracker.models.post')
    importlib.import_module('influencer_tracker.models.scrap_job')

    return app
