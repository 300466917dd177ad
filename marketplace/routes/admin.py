from flask import Blueprint, g

from marketplace.auth_mw import require_admin
from marketplace.db import db
from marketplace.services.admin_service import (
    delete_listing_svc,
    delete_user_svc,
    list_listings_full_svc,
    list_users_svc,
    overview_svc,
    sold_items_svc,
)
from marketplace.utils.responses import ok

bp = Blueprint("admin", __name__, url_prefix="/admin")


@bp.get("/users")
@require_admin
def list_users():
    return ok(list_users_svc(db.session))


@bp.delete("/users/<int:user_id>")
@require_admin
def delete_user(user_id: int):
    delete_user_svc(db.session, g.current_user, user_id)
    return ok({"deleted": True, "id": user_id})


@bp.get("/listings_full")
@require_admin
def listings_full():
    return ok(list_listings_full_svc(db.session))


@bp.delete("/listings/<int:listing_id>")
@require_admin
def delete_listing(listing_id: int):
    delete_listing_svc(db.session, g.current_user, listing_id)
    return ok({"deleted": True, "id": listing_id})


@bp.get("/sold_items")
@require_admin
def sold_items():
    return ok(sold_items_svc(db.session))


@bp.get("/stats")
@require_admin
def stats():
    return ok(overview_svc(db.session))
