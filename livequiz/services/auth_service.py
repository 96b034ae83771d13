import datetime
import logging
from urllib.parse import quote

import jwt
from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from livequiz.errors import AuthenticationError, ConflictError, NotFoundError
from livequiz.models import User

logger = logging.getLogger(__name__)


def default_avatar(username):
    return f"https://ui-avatars.com/api/?name={quote(username)}&background=random"


# ---------------------------
# TOKENS
# ---------------------------
def create_access_token(user: User) -> str:
    cfg = current_app.config
    expires = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=cfg["JWT_EXPIRES_DAYS"])
    payload = {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "exp": expires,
    }
    return jwt.encode(payload, cfg["JWT_SECRET"], algorithm=cfg["JWT_ALGORITHM"])


def decode_access_token(token: str) -> dict:
    cfg = current_app.config
    try:
        return jwt.decode(token, cfg["JWT_SECRET"], algorithms=[cfg["JWT_ALGORITHM"]])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired. Please login again.")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token. Authentication failed.")


def user_from_token(token: str) -> User:
    claims = decode_access_token(token)
    user = db.session.get(User, claims.get("id"))
    if not user:
        raise AuthenticationError("User not found. Token may be invalid.")
    return user


def parse_bearer(header_value):
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not header_value:
        raise AuthenticationError("No token provided. Please login first.")
    parts = header_value.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid token format. Use: Bearer <token>")
    return parts[1]


# ---------------------------
# ACCOUNTS
# ---------------------------
def register_user(data) -> User:
    if User.query.filter_by(email=data.email).first():
        raise ConflictError("Email already registered")
    if User.query.filter_by(username=data.username).first():
        raise ConflictError("Username already taken")

    user = User(
        username=data.username,
        email=data.email,
        password_hash=generate_password_hash(data.password),
        avatar=data.avatar or default_avatar(data.username),
    )
    db.session.add(user)
    db.session.commit()
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


def authenticate_user(email, password) -> User:
    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise AuthenticationError("Invalid email or password")
    return user


def update_profile(user: User, data) -> User:
    if data.username and data.username != user.username:
        if User.query.filter_by(username=data.username).first():
            raise ConflictError("Username already taken")
        user.username = data.username
    if data.avatar:
        user.avatar = data.avatar
    db.session.commit()
    return user


def get_user(user_id) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
