from flask_sqlalchemy import SQLAlchemy # ORM for database interactions.
from flask_login import LoginManager    # Manages user sessions for login and logout functionality.
from flask_migrate import Migrate       # Alembic-based schema migrations.

# Extension instances are created unbound here and attached to the app in
# create_app() via init_app(), so models and blueprints can import them
# without importing the app itself.
db = SQLAlchemy()

login_manager = LoginManager()

migrate = Migrate()
