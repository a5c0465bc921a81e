import logging
import os # Standard library for operating system interactions (e.g., creating directories).

import click
from flask import Flask, jsonify # The main Flask class.
from config import Config # Import the application's configuration class.
from extensions import db, login_manager, migrate # Import initialized extensions.
from models.user import User # Import User model, primarily for the user_loader.

# Application Factory Function
def create_app(config_class=Config):
    """
    Application factory for creating and configuring the Flask app.
    Tests pass their own config class (see tests/conftest.py).
    """
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration from the given Config object (defined in config.py).
    app.config.from_object(config_class)

    # Route handlers log through app.logger; the analytics package logs through
    # module loggers, so both follow the configured level.
    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    app.logger.setLevel(log_level)
    logging.getLogger('analytics').setLevel(log_level)

    # --- Initialize Flask Extensions ---
    db.init_app(app)
    # Links the Flask app and SQLAlchemy DB instance to the migration engine.
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # The dashboard is a JSON API, so unauthenticated calls get a 401 body
    # instead of a redirect to a login page.
    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "message": "Authentication required"}), 401

    # --- Flask-Login User Loader ---
    # Reloads the user object from the user ID stored in the session on each request.
    @login_manager.user_loader
    def load_user(user_id):
        """Loads a user from the database given their ID."""
        return db.session.get(User, int(user_id))

    try:
        os.makedirs(app.instance_path)
    except OSError:
        pass # Folder already exists.

    # --- Import and Register Blueprints ---
    from routes.auth import auth_bp
    from routes.analytics import analytics_bp
    from routes.reports import reports_bp

    app.register_blueprint(auth_bp)      # /auth/...
    app.register_blueprint(analytics_bp) # /analytics/api/data, /analytics/api/cache
    app.register_blueprint(reports_bp)   # /analytics/api/schedules

    register_commands(app)

    return app # Return the configured Flask app instance.

def register_commands(app):
    """Registers maintenance commands with the `flask` CLI."""

    @app.cli.command('purge-analytics-cache')
    def purge_analytics_cache():
        """Delete expired analytics cache entries."""
        from analytics.cache import ResultCache
        from analytics.storage import SQLAlchemyAnalyticsStore

        cache = ResultCache(
            SQLAlchemyAnalyticsStore(db.session),
            ttl_minutes=app.config['ANALYTICS_CACHE_TTL_MINUTES'],
        )
        removed = cache.purge_expired()
        click.echo(f"Purged {removed} expired analytics cache entries.")

# This block allows running the Flask development server directly using `python app.py`.
if __name__ == '__main__':
    app = create_app() # Create an app instance using the factory.
    app.run(debug=True)
