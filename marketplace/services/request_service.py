import logging

from marketplace.errors import (
    Forbidden,
    IllegalTransition,
    ListingUnavailable,
    RequestNotFound,
    ValidationFailure,
)
from marketplace.models import (
    REQUEST_TRANSITIONS,
    BuyRequest,
    ListingStatus,
    RequestStatus,
    User,
)
from marketplace.services.listing_service import get_listing_svc
from marketplace.utils.responses import commit_or_rollback

logger = logging.getLogger(__name__)

ACTIONS = {
    "accept": RequestStatus.accepted,
    "reject": RequestStatus.rejected,
}


def transition(req: BuyRequest, target: RequestStatus):
    if target not in REQUEST_TRANSITIONS[req.status]:
        raise IllegalTransition(
            f"request {req.id} cannot move from {req.status.value} to {target.value}"
        )
    req.status = target


def get_request_svc(session, request_id: int) -> BuyRequest:
    req = session.get(BuyRequest, request_id)
    if req is None:
        raise RequestNotFound("Request not found")
    return req


def create_request_svc(session, buyer, listing_id) -> BuyRequest:
    try:
        listing_id = int(listing_id)
    except (TypeError, ValueError):
        raise ValidationFailure("listing_id is required")
    listing = get_listing_svc(session, listing_id)
    if listing.status != ListingStatus.active:
        raise ListingUnavailable("Listing already sold")

    req = BuyRequest(
        listing=listing,
        buyer=buyer,
        seller_id=listing.seller_id,
        status=RequestStatus.pending,
    )
    session.add(req)
    commit_or_rollback(session)
    logger.info("buyer %s requested listing #%s (request #%s)", buyer.id, listing.id, req.id)
    return req


def my_requests_svc(session, buyer) -> list:
    rows = (
        session.query(BuyRequest)
        .filter(BuyRequest.buyer_id == buyer.id)
        .order_by(BuyRequest.created_at.desc(), BuyRequest.id.desc())
        .all()
    )
    data = []
    for r in rows:
        item = r.to_dict()
        item["listing_title"] = r.listing.title
        item["price"] = r.listing.price
        data.append(item)
    return data


def incoming_requests_svc(session, seller) -> list:
    rows = (
        session.query(BuyRequest, User)
        .join(User, BuyRequest.buyer_id == User.id)
        .filter(BuyRequest.seller_id == seller.id)
        .order_by(BuyRequest.created_at.desc(), BuyRequest.id.desc())
        .all()
    )
    data = []
    for r, buyer in rows:
        item = r.to_dict()
        item.update({
            "listing_title": r.listing.title,
            "buyer_name": buyer.name,
            "buyer_email": buyer.email,
            "buyer_phone": buyer.phone,
            "buyer_location": buyer.location,
        })
        data.append(item)
    return data


def decide_request_svc(session, seller, request_id: int, action: str) -> BuyRequest:
    """Accept or reject a pending request on one of the caller's listings.

    Repeating the action that produced the current state is a no-op, so a
    client retrying an accept gets the same answer back.
    """
    target = ACTIONS.get(action)
    if target is None:
        raise ValidationFailure("action must be accept or reject")

    req = get_request_svc(session, request_id)
    if req.seller_id != seller.id:
        raise Forbidden("Only the seller can decide this request")
    if req.status == target:
        return req
    if req.status != RequestStatus.pending:
        raise IllegalTransition(f"request {req.id} is already {req.status.value}")

    transition(req, target)
    commit_or_rollback(session)
    logger.info("seller %s %sed request #%s", seller.id, action, req.id)
    return req
