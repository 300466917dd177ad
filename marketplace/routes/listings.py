from flask import Blueprint, current_app, g, request

from marketplace.auth_mw import require_auth
from marketplace.db import db
from marketplace.services.listing_service import (
    create_listing_svc,
    get_listing_svc,
    list_listings_svc,
)
from marketplace.utils.responses import ok

bp = Blueprint("listings", __name__, url_prefix="/listings")


@bp.get("/")
def list_listings():
    return ok([l.to_dict() for l in list_listings_svc(db.session, request.args)])


@bp.get("/<int:listing_id>")
def get_listing(listing_id: int):
    return ok(get_listing_svc(db.session, listing_id).to_dict())


@bp.post("/")
@require_auth
def create_listing():
    cfg = current_app.config
    data = request.get_json(silent=True) or {}
    listing = create_listing_svc(
        db.session,
        g.current_user,
        data,
        markup_rate=cfg["MARKUP_RATE"],
        flat_fee=cfg["FLAT_FEE"],
        max_photos=cfg["MAX_PHOTOS"],
    )
    return ok(listing.to_dict(), 201)
