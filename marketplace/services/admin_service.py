import logging

from sqlalchemy import func
from sqlalchemy.orm import aliased, joinedload

from marketplace.errors import SelfDeleteForbidden, UserNotFound
from marketplace.models import (
    BuyRequest,
    Listing,
    ListingStatus,
    Order,
    Role,
    User,
)
from marketplace.services.listing_service import get_listing_svc
from marketplace.utils.responses import commit_or_rollback

logger = logging.getLogger(__name__)


def list_users_svc(session) -> list:
    users = session.query(User).order_by(User.id.desc()).all()
    return [u.to_dict() for u in users]


def delete_user_svc(session, admin, user_id: int):
    """Hard delete a user together with their listings and sent requests."""
    if user_id == admin.id:
        raise SelfDeleteForbidden("You cannot delete your own account")
    u = session.get(User, user_id)
    if u is None:
        raise UserNotFound("User not found")
    n_listings = len(u.listings)
    session.delete(u)
    commit_or_rollback(session)
    logger.info("admin %s deleted user %s and %s listing(s)", admin.id, user_id, n_listings)


def list_listings_full_svc(session) -> list:
    rows = (
        session.query(Listing)
        .options(joinedload(Listing.seller))
        .order_by(Listing.created_at.desc(), Listing.id.desc())
        .all()
    )
    data = []
    for l in rows:
        item = l.to_dict()
        item["profit"] = l.profit
        data.append(item)
    return data


def delete_listing_svc(session, admin, listing_id: int):
    listing = get_listing_svc(session, listing_id)
    session.delete(listing)
    commit_or_rollback(session)
    logger.info("admin %s deleted listing #%s", admin.id, listing_id)


def sold_items_svc(session) -> list:
    buyer = aliased(User, name="buyer")
    seller = aliased(User, name="seller")
    rows = (
        session.query(Order, Listing, buyer, seller)
        .join(BuyRequest, Order.request_id == BuyRequest.id)
        .join(Listing, BuyRequest.listing_id == Listing.id)
        .join(buyer, BuyRequest.buyer_id == buyer.id)
        .join(seller, Listing.seller_id == seller.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    data = []
    for o, l, b, s in rows:
        data.append({
            "id": l.id,
            "order_id": o.id,
            "request_id": o.request_id,
            "title": l.title,
            "category": l.category,
            "price": l.price,
            "seller_price": l.seller_price,
            "profit": l.profit,
            "payment_method": o.payment_method.value,
            "seller_name": s.name,
            "seller_email": s.email,
            "seller_phone": s.phone,
            "buyer_name": b.name,
            "buyer_email": b.email,
            "buyer_phone": b.phone,
            "sold_date": o.created_at.isoformat() if o.created_at else None,
        })
    return data


def overview_svc(session) -> dict:
    by_role = dict(session.query(User.role, func.count(User.id)).group_by(User.role).all())
    by_status = dict(
        session.query(Listing.status, func.count(Listing.id)).group_by(Listing.status).all()
    )
    profit = dict(
        session.query(Listing.status, func.coalesce(func.sum(Listing.price - Listing.seller_price), 0))
        .group_by(Listing.status)
        .all()
    )
    return {
        "users": {
            "total": sum(by_role.values()),
            **{r.value: by_role.get(r, 0) for r in Role},
        },
        "listings": {
            "total": sum(by_status.values()),
            **{s.value: by_status.get(s, 0) for s in ListingStatus},
        },
        "orders": session.query(func.count(Order.id)).scalar() or 0,
        "profit": {
            "realised": float(profit.get(ListingStatus.sold, 0)),
            "potential": float(profit.get(ListingStatus.active, 0)),
        },
    }
