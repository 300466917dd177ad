from flask import Blueprint, current_app, request

from marketplace.auth_mw import bearer_token, token_config
from marketplace.db import db
from marketplace.services.identity_service import (
    current_user_svc,
    login_svc,
    register_user_svc,
)
from marketplace.utils.responses import ok

bp = Blueprint("auth", __name__, url_prefix="/auth")


def _token_response(u, token, code=200):
    return ok({"access_token": token, "token_type": "bearer", "user": u.to_dict()}, code)


@bp.post("/register")
def register():
    d = request.get_json(silent=True) or {}
    u, token = register_user_svc(db.session, d, token_config())
    return _token_response(u, token, 201)


@bp.post("/login")
def login():
    d = request.get_json(silent=True) or {}
    u, token = login_svc(db.session, d.get("email"), d.get("password"), token_config())
    return _token_response(u, token)


@bp.get("/me")
def me():
    cfg = current_app.config
    return ok(current_user_svc(db.session, bearer_token(), cfg["JWT_SECRET"], cfg["JWT_ALGO"]))
