from functools import wraps
from flask import current_app, g, request

from marketplace.db import db
from marketplace.errors import Forbidden, Unauthorized
from marketplace.services.identity_service import resolve_token


def bearer_token():
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1].strip() or None


def token_config() -> dict:
    cfg = current_app.config
    return {
        "secret": cfg["JWT_SECRET"],
        "algo": cfg["JWT_ALGO"],
        "ttl_hours": cfg["TOKEN_TTL_HOURS"],
    }


def load_current_user():
    token = bearer_token()
    if token is None:
        return None
    cfg = current_app.config
    return resolve_token(db.session, token, cfg["JWT_SECRET"], cfg["JWT_ALGO"])


def require_auth(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        user = load_current_user()
        if user is None:
            raise Unauthorized("Unauthorized")
        g.current_user = user
        return func(*args, **kwargs)

    return wrapper


def require_admin(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        user = load_current_user()
        if user is None:
            raise Unauthorized("Unauthorized")
        if not user.is_admin:
            raise Forbidden("Admin access required")
        g.current_user = user
        return func(*args, **kwargs)

    return wrapper
