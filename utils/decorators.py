from functools import wraps
from flask import jsonify, current_app, request
from flask_login import current_user

def admin_required(f):
    """
    Decorator restricting a JSON API route to users with the ADMIN role.
    Must be applied below @login_required so that current_user is authenticated.
    Non-admin callers receive a 403 JSON response.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            current_app.logger.warning(f"Forbidden request to {request.path} by user {getattr(current_user, 'id', None)}: admin access required.")
            return jsonify({"success": False, "message": "Admin access required"}), 403
        return f(*args, **kwargs)
    return decorated_function
