import logging
import secrets
from datetime import datetime, timedelta

import jwt
from werkzeug.security import generate_password_hash, check_password_hash

from marketplace.errors import (
    DuplicateEmail,
    InvalidCredentials,
    Unauthorized,
    ValidationFailure,
)
from marketplace.models import Role, User
from marketplace.utils.parsing import clean_str, require_fields
from marketplace.utils.responses import commit_or_rollback

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = {Role.buyer.value, Role.seller.value}


def normalize_email(s: str | None) -> str | None:
    if not s or not isinstance(s, str):
        return None
    return s.strip().lower()


def make_token(u: User, secret: str, algo: str = "HS256", ttl_hours: int = 6) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": str(u.id),
        "role": u.role.value,
        "jti": secrets.token_hex(16),
        "iat": now,
        "exp": now + timedelta(hours=ttl_hours),
    }
    return jwt.encode(payload, secret, algorithm=algo)


def register_user_svc(session, data: dict, token_cfg: dict):
    require_fields(data, "name", "email", "password")
    if not all(isinstance(data.get(k), str) for k in ("name", "email", "password")):
        raise ValidationFailure("name, email and password must be strings")
    email = normalize_email(data.get("email"))
    role = (clean_str(data.get("role")) or Role.buyer.value).lower()
    if role not in SELF_SERVICE_ROLES:
        raise ValidationFailure("role must be buyer or seller")

    if session.query(User).filter_by(email=email).first():
        raise DuplicateEmail("Email already exists")

    u = User(
        name=clean_str(data.get("name")),
        email=email,
        password=generate_password_hash(data.get("password")),
        role=Role(role),
        location=clean_str(data.get("location")),
        phone=clean_str(data.get("phone")) or "",
    )
    session.add(u)
    commit_or_rollback(session)
    logger.info("registered user id=%s role=%s", u.id, role)
    return u, make_token(u, **token_cfg)


def login_svc(session, email: str | None, password: str | None, token_cfg: dict):
    email = normalize_email(email)
    u = session.query(User).filter_by(email=email).first() if email else None
    if not isinstance(password, str):
        password = None
    if not u or not password or not check_password_hash(u.password, password):
        logger.warning("refused login for %s", email)
        raise InvalidCredentials("Invalid credentials")
    return u, make_token(u, **token_cfg)


def resolve_token(session, token: str | None, secret: str, algo: str = "HS256"):
    """Return the user a bearer token belongs to, or None when it cannot be trusted."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, secret, algorithms=[algo])
        user_id = int(payload.get("sub"))
    except (jwt.InvalidTokenError, TypeError, ValueError):
        return None
    return session.get(User, user_id)


def current_user_svc(session, token, secret, algo="HS256") -> dict:
    u = resolve_token(session, token, secret, algo)
    if u is None:
        raise Unauthorized("Unauthorized")
    return u.to_dict()
