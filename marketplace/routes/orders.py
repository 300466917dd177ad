from flask import Blueprint, g, request

from marketplace.auth_mw import require_auth
from marketplace.db import db
from marketplace.services.order_service import checkout_svc, my_orders_svc
from marketplace.utils.responses import ok

bp = Blueprint("orders", __name__, url_prefix="/orders")


@bp.post("/")
@require_auth
def checkout():
    d = request.get_json(silent=True) or {}
    order = checkout_svc(db.session, g.current_user, d)
    return ok(order.to_dict(), 201)


@bp.get("/my-orders")
@require_auth
def my_orders():
    return ok(my_orders_svc(db.session, g.current_user))
