import json
import logging

from sqlalchemy import false
from sqlalchemy.orm import joinedload

from marketplace.errors import ListingNotFound, ValidationFailure
from marketplace.models import Condition, Listing, ListingStatus
from marketplace.utils.parsing import clean_str, parse_float, parse_int, require_fields
from marketplace.utils.pricing import DEFAULT_FLAT_FEE, DEFAULT_MARKUP_RATE, market_price
from marketplace.utils.responses import commit_or_rollback

logger = logging.getLogger(__name__)

MAX_SELLER_PRICE = 10_000_000

SORTS = {
    "newest":     (Listing.created_at.desc(), Listing.id.desc()),
    "price_low":  (Listing.price.asc(), Listing.id.asc()),
    "price_high": (Listing.price.desc(), Listing.id.desc()),
}


def _photos(raw, max_photos: int) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationFailure("photos must be a list")
    if len(raw) > max_photos:
        raise ValidationFailure(f"at most {max_photos} photos allowed")
    if not all(isinstance(p, str) and p for p in raw):
        raise ValidationFailure("photos must be non-empty strings")
    return list(raw)


def create_listing_svc(session, seller, data: dict, markup_rate=DEFAULT_MARKUP_RATE,
                       flat_fee=DEFAULT_FLAT_FEE, max_photos: int = 5) -> Listing:
    require_fields(data, "title", "price")
    seller_price = parse_float(data.get("price"))
    if seller_price is None or seller_price <= 0:
        raise ValidationFailure("price must be a positive number")
    if seller_price > MAX_SELLER_PRICE:
        raise ValidationFailure(f"price must not exceed {MAX_SELLER_PRICE}")

    raw_condition = (clean_str(data.get("condition")) or Condition.used.value).lower()
    if raw_condition not in Condition.__members__:
        raise ValidationFailure("unknown condition: " + raw_condition)

    photos = _photos(data.get("photos"), max_photos)

    listing = Listing(
        seller=seller,
        title=clean_str(data.get("title")),
        category=clean_str(data.get("category")),
        brand=clean_str(data.get("brand")),
        model_name=clean_str(data.get("model")),
        condition=Condition(raw_condition),
        seller_price=seller_price,
        price=market_price(seller_price, markup_rate, flat_fee),
        location=clean_str(data.get("location")),
        description=data.get("description"),
        status=ListingStatus.active,
        working_parts=data.get("working_parts"),
        photos=json.dumps(photos),
    )
    session.add(listing)
    commit_or_rollback(session)
    logger.info("seller %s listed #%s at %s (market %s)", seller.id, listing.id,
                seller_price, listing.price)
    return listing


def get_listing_svc(session, listing_id: int) -> Listing:
    listing = session.get(Listing, listing_id)
    if listing is None:
        raise ListingNotFound("Listing not found")
    return listing


def list_listings_svc(session, args) -> list:
    """Filter listings; every filter is optional and they all AND together."""
    q = session.query(Listing).options(joinedload(Listing.seller))

    kw = clean_str(args.get("q"))
    if kw:
        q = q.filter(Listing.title.icontains(kw, autoescape=True))

    category = clean_str(args.get("category"))
    if category:
        q = q.filter(Listing.category == category)

    # An unknown enum value matches nothing.
    condition = clean_str(args.get("condition"))
    if condition:
        q = q.filter(Listing.condition == Condition(condition)
                     if condition in Condition.__members__ else false())

    status = clean_str(args.get("status"))
    if status:
        q = q.filter(Listing.status == ListingStatus(status)
                     if status in ListingStatus.__members__ else false())

    seller_id = parse_int(args.get("seller_id"))
    if seller_id is not None:
        q = q.filter(Listing.seller_id == seller_id)

    min_price = parse_float(args.get("min_price"), None, 0)
    if min_price is not None:
        q = q.filter(Listing.price >= min_price)

    max_price = parse_float(args.get("max_price"), None, 0)
    if max_price is not None:
        q = q.filter(Listing.price <= max_price)

    q = q.order_by(*SORTS.get(args.get("sort"), SORTS["newest"]))

    limit = parse_int(args.get("limit"), None, 1)
    if limit is not None:
        q = q.limit(limit)
    return q.all()
