from cryptography.fernet import Fernet # Symmetric encryption library.
from flask import current_app # To access application configuration (e.g., FERNET_KEY).

def get_fernet():
    """
    Returns a Fernet cipher built from the FERNET_KEY setting.

    Raises:
        ValueError: If FERNET_KEY is empty or missing from the app config.
    """
    key = current_app.config.get('FERNET_KEY')
    if not key:
        current_app.logger.critical("FERNET_KEY is not configured; cannot encrypt or decrypt platform tokens.")
        raise ValueError("FERNET_KEY not configured properly. Please set it in your application configuration.")
    return Fernet(key)

def encrypt_token(token):
    """
    Encrypts a Meta access token for storage in a Text column.

    Args:
        token (str or None): Plain-text token.

    Returns:
        str or None: The Fernet token as a UTF-8 string, or None for None input.
    """
    if token is None:
        return None
    return get_fernet().encrypt(token.encode('utf-8')).decode('utf-8')

def decrypt_token(encrypted_token):
    """
    Reverses encrypt_token().

    Args:
        encrypted_token (str or None): Value previously returned by encrypt_token.

    Returns:
        str or None: The plain-text token, or None for None input.

    Raises:
        cryptography.fernet.InvalidToken: Wrong key, tampered or malformed input.
    """
    if encrypted_token is None:
        return None
    return get_fernet().decrypt(encrypted_token.encode('utf-8')).decode('utf-8')
