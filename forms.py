from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Email, EqualTo, Length, ValidationError # Import standard validators.
from models.user import User # Import User model for email validation.

# The dashboard front-end posts JSON; Flask-WTF reads the JSON body into these
# forms automatically when the request's content type is application/json.

class RegistrationForm(FlaskForm):
    """
    Form for creating a dashboard account.
    Custom validation rejects an email address that is already registered.
    """
    email = StringField('Email', validators=[DataRequired(message="Email is required."), Email(message="Invalid email address.")])
    password = PasswordField('Password', validators=[DataRequired(message="Password is required."), Length(min=6, message="Password must be at least 6 characters long.")])
    confirm_password = PasswordField('Confirm Password', validators=[DataRequired(message="Please confirm your password."), EqualTo('password', message="Passwords must match.")])
    full_name = StringField('Full Name', validators=[DataRequired(message="Full name is required.")])

    def validate_email(self, email):
        """
        Raises ValidationError if a user with this email (case-insensitive) already exists.
        """
        user = User.query.filter_by(email=email.data.lower()).first()
        if user:
            raise ValidationError('That email address is already registered. Please choose a different one or log in.')

class LoginForm(FlaskForm):
    """
    Form for email/password login, with an optional persistent session.
    """
    email = StringField('Email', validators=[DataRequired(message="Email is required."), Email(message="Invalid email address.")])
    password = PasswordField('Password', validators=[DataRequired(message="Password is required.")])
    remember_me = BooleanField('Remember Me')
