from flask import Blueprint, g, request

from marketplace.auth_mw import require_auth
from marketplace.db import db
from marketplace.services.request_service import (
    create_request_svc,
    decide_request_svc,
    incoming_requests_svc,
    my_requests_svc,
)
from marketplace.utils.responses import ok

bp = Blueprint("requests", __name__, url_prefix="/requests")


@bp.post("/")
@require_auth
def create_request():
    d = request.get_json(silent=True) or {}
    req = create_request_svc(db.session, g.current_user, d.get("listing_id"))
    return ok(req.to_dict(), 201)


@bp.get("/my-requests")
@require_auth
def my_requests():
    return ok(my_requests_svc(db.session, g.current_user))


@bp.get("/incoming")
@require_auth
def incoming():
    return ok(incoming_requests_svc(db.session, g.current_user))


@bp.put("/<int:request_id>/<string:action>")
@require_auth
def decide(request_id: int, action: str):
    req = decide_request_svc(db.session, g.current_user, request_id, action)
    return ok(req.to_dict())
