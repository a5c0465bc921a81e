import enum
from datetime import datetime
from extensions import db
from utils.security import encrypt_token, decrypt_token # For encrypting/decrypting tokens.

class PlatformNameEnum(enum.Enum):
    """
    Enumeration for supported advertising platform names.
    Both are served through the Meta Graph API.
    """
    FACEBOOK = 'FACEBOOK'
    INSTAGRAM = 'INSTAGRAM'

    @property
    def display_name(self):
        return self.value.capitalize() # 'FACEBOOK' -> 'Facebook'.

class IntegrationStatusEnum(enum.Enum):
    """
    Enumeration for the possible statuses of an ad platform integration.
    Indicates the current state of the connection to the ad platform.
    """
    ACTIVE = 'active'    # Integration is active and tokens are valid.
    REVOKED = 'revoked'  # User has revoked access, or token was invalidated by the provider.
    EXPIRED = 'expired'  # Access token has expired.
    PENDING = 'pending'  # Integration process started but not yet completed.
    ERROR = 'error'      # An error occurred, making the integration non-operational.

class AdPlatformIntegration(db.Model):
    """
    A user's connected ad account on Facebook or Instagram.

    The analytics response lists these as the user's platforms. The OAuth
    access token obtained when the account was connected is stored
    encrypted and exposed through the `access_token` property.
    """
    __tablename__ = 'ad_platform_integrations' # Specifies the database table name.

    id = db.Column(db.Integer, primary_key=True) # Unique identifier for the integration record.

    # --- User and Platform Identification ---
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    platform_name = db.Column(db.Enum(PlatformNameEnum), nullable=False, index=True)

    # --- Ad Account Details ---
    # Meta ad account ID (e.g., 'act_1234567890'). Nullable until the user selects one.
    ad_account_id = db.Column(db.String(255), nullable=True, index=True)
    ad_account_name = db.Column(db.String(255), nullable=True)

    # --- Token Management (Encrypted) ---
    access_token_encrypted = db.Column(db.Text, nullable=True)
    # Meta long-lived tokens expire; nullable if unknown.
    token_expiry = db.Column(db.DateTime, nullable=True)

    status = db.Column(db.Enum(IntegrationStatusEnum), nullable=False, default=IntegrationStatusEnum.PENDING, index=True)

    # --- Timestamps ---
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # --- Relationships ---
    user = db.relationship('User', backref=db.backref('ad_integrations', lazy='dynamic'))

    def __repr__(self):
        return f'<AdPlatformIntegration UserID:{self.user_id} - Platform:{self.platform_name.value} (AdAccount: {self.ad_account_name or self.ad_account_id}) - Status:{self.status.value}>'

    @property
    def access_token(self):
        """
        Decrypted access token, or None if no token is stored.
        Raises cryptography.fernet.InvalidToken if the stored value cannot be decrypted.
        """
        if self.access_token_encrypted:
            return decrypt_token(self.access_token_encrypted)
        return None

    @access_token.setter
    def access_token(self, value):
        # Encrypt before storing; a falsy value clears the token.
        if value:
            self.access_token_encrypted = encrypt_token(value)
        else:
            self.access_token_encrypted = None
