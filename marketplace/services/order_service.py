import logging

from sqlalchemy import or_

from marketplace.errors import Forbidden, ValidationFailure
from marketplace.models import (
    BuyRequest,
    ListingStatus,
    Order,
    PaymentMethod,
    RequestStatus,
)
from marketplace.services.request_service import get_request_svc, transition
from marketplace.utils.parsing import clean_str, parse_int, require_fields
from marketplace.utils.responses import commit_or_rollback

logger = logging.getLogger(__name__)

SHIPPING_FIELDS = (
    "shipping_name",
    "shipping_email",
    "shipping_phone",
    "shipping_address",
    "shipping_pincode",
)


def checkout_svc(session, buyer, data: dict) -> Order:
    """Turn an accepted request into an order and close out the listing.

    The order, the request completion, the listing sale and the rejection of
    the listing's other open requests are committed together.
    """
    request_id = parse_int(data.get("request_id"))
    if request_id is None:
        raise ValidationFailure("request_id is required")
    req = get_request_svc(session, request_id)
    if req.buyer_id != buyer.id:
        raise Forbidden("Only the buyer can check out this request")

    require_fields(data, *SHIPPING_FIELDS, "payment_method")
    method = clean_str(data.get("payment_method"))
    if method not in PaymentMethod.__members__:
        raise ValidationFailure("unknown payment_method: " + method)

    transition(req, RequestStatus.completed)

    order = Order(
        request=req,
        payment_method=PaymentMethod(method),
        **{k: clean_str(data.get(k)) for k in SHIPPING_FIELDS},
    )
    session.add(order)

    listing = req.listing
    listing.status = ListingStatus.sold
    for other in listing.requests:
        if other.id != req.id and other.status in (RequestStatus.pending, RequestStatus.accepted):
            transition(other, RequestStatus.rejected)

    commit_or_rollback(session)
    logger.info("buyer %s checked out request #%s as order #%s (%s)",
                buyer.id, req.id, order.id, method)
    return order


def my_orders_svc(session, user) -> list:
    rows = (
        session.query(Order)
        .join(BuyRequest, Order.request_id == BuyRequest.id)
        .filter(or_(BuyRequest.buyer_id == user.id, BuyRequest.seller_id == user.id))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    data = []
    for o in rows:
        item = o.to_dict()
        item.update({
            "listing_id": o.request.listing_id,
            "listing_title": o.request.listing.title,
            "price": o.request.listing.price,
            "buyer_id": o.request.buyer_id,
            "seller_id": o.request.seller_id,
        })
        data.append(item)
    return data
