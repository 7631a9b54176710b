import logging
from functools import wraps

from flask import g, session
from flask_smorest import abort
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash

from src.dashboard import db
from src.dashboard.models.models import User
from src.dashboard.schemas.auth_schema import CredentialsSchema
from src.dashboard.utils.exceptions import AuthError

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"

credentials_schema = CredentialsSchema()


def get_user(email):
    return db.session.execute(db.select(User).filter_by(email=email)).scalar_one_or_none()


def sign_in(form):
    """Check email/password credentials and start a session for the user."""
    try:
        credentials = credentials_schema.load(dict(form.items()))
    except ValidationError:
        raise AuthError(AuthError.CREDENTIALS_SIGNIN, "Invalid credentials format")

    try:
        user = get_user(credentials["email"])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"User lookup failed during sign-in: {e}", exc_info=True)
        raise AuthError(AuthError.CALLBACK_ROUTE_ERROR, "Could not look up the user") from e

    if user is None or not check_password_hash(user.password, credentials["password"]):
        logger.info(f"Rejected sign-in for {credentials['email']}")
        raise AuthError(AuthError.CREDENTIALS_SIGNIN, "Invalid credentials")

    session.clear()
    session[SESSION_USER_KEY] = user.id
    return user


def authenticate(form):
    """Sign in from a login form.

    Returns None on success or a message to show next to the form.
    Anything that is not an AuthError is re-raised for the outer handler.
    """
    try:
        sign_in(form)
    except AuthError as error:
        if error.type == AuthError.CREDENTIALS_SIGNIN:
            return "Invalid credentials"
        return "Something went wrong"
    return None


def sign_out():
    session.clear()


def current_user():
    user_id = session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    return db.session.get(User, user_id)


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            abort(401, message="Authentication required.")
        g.user = user
        return view(*args, **kwargs)
    return wrapped
