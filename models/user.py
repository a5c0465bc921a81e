import enum
from datetime import datetime
from extensions import db
import bcrypt
from flask_login import UserMixin # For Flask-Login integration (e.g., current_user).

class UserRoleEnum(enum.Enum):
    """
    Enumeration for user roles.
    ADMIN users may view and clear the analytics cache for every tenant.
    """
    ADMIN = 'ADMIN'
    MARKETING = 'MARKETING'

class User(db.Model, UserMixin):
    """
    Represents a user (tenant) of the dashboard.

    Campaigns, connected ad accounts, cached analytics and scheduled reports
    all belong to exactly one user. UserMixin provides the methods required
    by Flask-Login (e.g., is_authenticated, get_id).
    """
    __tablename__ = 'users' # Specifies the database table name.

    # --- Basic User Information ---
    id = db.Column(db.Integer, primary_key=True) # Unique identifier for the user.
    email = db.Column(db.String(120), unique=True, nullable=False, index=True) # User's email address, used for login. Must be unique.
    password_hash = db.Column(db.String(128), nullable=True) # bcrypt hash of the user's password.
    full_name = db.Column(db.String(100), nullable=True) # User's full name.
    # Role of the user. Defaults to MARKETING; ADMIN unlocks cache administration.
    role = db.Column(db.Enum(UserRoleEnum), nullable=False, default=UserRoleEnum.MARKETING)

    # --- Timestamps ---
    created_at = db.Column(db.DateTime, default=datetime.utcnow) # Timestamp of when the user record was created.
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow) # Timestamp of the last update to the user record.

    # --- Relationships ---
    # Campaigns created by this user. 'lazy=dynamic' returns a query rather than loading all rows.
    campaigns = db.relationship('Campaign', backref='owner', lazy='dynamic')

    def set_password(self, password):
        """
        Hashes the provided password and stores it in `password_hash`.

        Args:
            password (str): The plain-text password to hash.
        """
        # Password is encoded to UTF-8 before hashing. Salt is generated automatically by bcrypt.
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        """
        Verifies if the provided password matches the stored hashed password.

        Args:
            password (str): The plain-text password to check.

        Returns:
            bool: True if the password matches, False otherwise (including when no hash is set).
        """
        if self.password_hash:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        return False # No password hash stored, so password check fails.

    @property
    def is_admin(self):
        return self.role == UserRoleEnum.ADMIN

    def to_dict(self):
        """Public representation used by the /auth/me endpoint."""
        return {
            'id': self.id,
            'email': self.email,
            'fullName': self.full_name,
            'role': self.role.value if self.role else None,
        }

    def __repr__(self):
        """
        Provides a string representation of the User object, useful for debugging.
        """
        return f'<User {self.email}>'
