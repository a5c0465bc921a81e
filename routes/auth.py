from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import IntegrityError

from forms import LoginForm, RegistrationForm
from models.user import User
from extensions import db

# Blueprint for authentication. Sessions are cookie-based via Flask-Login;
# every endpoint speaks JSON because the dashboard front-end is a SPA.
auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

def _form_error_response(form):
    # Flatten WTForms errors into a single message plus the per-field detail.
    messages = next(iter(form.errors.values()))
    return jsonify({"success": False, "message": messages[0], "errors": form.errors}), 400

@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Creates an account from JSON {email, password, confirm_password, full_name}
    and logs the new user in.
    """
    form = RegistrationForm()
    if not form.validate_on_submit():
        current_app.logger.warning(f"Registration rejected: {form.errors}")
        return _form_error_response(form)

    new_user = User(email=form.email.data.lower(), full_name=form.full_name.data)
    new_user.set_password(form.password.data) # Hash the password for secure storage.
    try:
        db.session.add(new_user)
        db.session.commit()
    except IntegrityError: # Concurrent registration with the same email.
        db.session.rollback()
        current_app.logger.warning(f"Registration failed for email {form.email.data}: email already exists (IntegrityError).")
        return jsonify({"success": False, "message": "That email address is already registered."}), 409

    login_user(new_user)
    current_app.logger.info(f"New user registered: {new_user.email}")
    return jsonify({"success": True, "data": new_user.to_dict()}), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticates JSON {email, password, remember_me} and starts a session.
    """
    form = LoginForm()
    if not form.validate_on_submit():
        return _form_error_response(form)

    user = User.query.filter_by(email=form.email.data.lower()).first()
    # user.check_password() compares the plain password with the stored bcrypt hash.
    if user is None or not user.check_password(form.password.data):
        current_app.logger.warning(f"Failed login attempt for email: {form.email.data} due to invalid credentials.")
        return jsonify({"success": False, "message": "Invalid email or password"}), 401

    login_user(user, remember=form.remember_me.data)
    current_app.logger.info(f"User {user.email} logged in successfully.")
    return jsonify({"success": True, "data": user.to_dict()})

@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    user_email = current_user.email # Capture before the session is cleared.
    logout_user()
    current_app.logger.info(f"User {user_email} logged out.")
    return jsonify({"success": True, "message": "Logged out"})

@auth_bp.route('/me')
@login_required
def me():
    """Returns the logged-in user's profile."""
    return jsonify({"success": True, "data": current_user.to_dict()})
