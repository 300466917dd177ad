# models.py
import json
from datetime import datetime
from enum import Enum
from sqlalchemy import Enum as SAEnum
from marketplace.db import db


class Role(Enum):
    buyer  = "buyer"
    seller = "seller"
    admin  = "admin"


class Condition(Enum):
    broken    = "broken"
    for_parts = "for_parts"
    used      = "used"
    new       = "new"


class ListingStatus(Enum):
    active = "active"
    sold   = "sold"


class RequestStatus(Enum):
    pending   = "pending"
    accepted  = "accepted"
    rejected  = "rejected"
    completed = "completed"


# Legal moves of a buy request. accepted -> rejected only happens when a
# sibling request on the same listing is checked out.
REQUEST_TRANSITIONS = {
    RequestStatus.pending:   {RequestStatus.accepted, RequestStatus.rejected},
    RequestStatus.accepted:  {RequestStatus.completed, RequestStatus.rejected},
    RequestStatus.rejected:  set(),
    RequestStatus.completed: set(),
}


class PaymentMethod(Enum):
    UPI        = "UPI"
    Card       = "Card"
    NetBanking = "NetBanking"
    Bitcoin    = "Bitcoin"
    COD        = "COD"


class User(db.Model):
    __tablename__ = "users"

    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(120), nullable=False)
    email      = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password   = db.Column(db.String(255), nullable=False)   # salted hash, never the raw password
    role       = db.Column(SAEnum(Role), nullable=False, default=Role.buyer, index=True)
    location   = db.Column(db.String(120))
    phone      = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    listings = db.relationship(
        "Listing", back_populates="seller", cascade="all, delete-orphan",
        order_by="Listing.id",
    )
    sent_requests = db.relationship(
        "BuyRequest", foreign_keys="BuyRequest.buyer_id", back_populates="buyer",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self):
        return self.role == Role.admin

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "location": self.location,
            "phone": self.phone,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"


class Listing(db.Model):
    __tablename__ = "listings"

    id            = db.Column(db.Integer, primary_key=True)
    seller_id     = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title         = db.Column(db.String(180), nullable=False, index=True)
    category      = db.Column(db.String(80), index=True)
    brand         = db.Column(db.String(80))
    model_name    = db.Column("model", db.String(80))
    condition     = db.Column(SAEnum(Condition), nullable=False, default=Condition.used, index=True)
    seller_price  = db.Column(db.Float, nullable=False)
    price         = db.Column(db.Float, nullable=False, index=True)   # market price
    location      = db.Column(db.String(120))
    description   = db.Column(db.Text)
    status        = db.Column(SAEnum(ListingStatus), nullable=False, default=ListingStatus.active, index=True)
    working_parts = db.Column(db.Text)
    photos        = db.Column(db.Text)   # JSON list, insertion order kept
    created_at    = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    seller = db.relationship("User", back_populates="listings")
    requests = db.relationship(
        "BuyRequest", back_populates="listing", cascade="all, delete-orphan",
    )

    @property
    def photo_list(self):
        try:
            photos = json.loads(self.photos or "[]")
        except ValueError:
            return []
        return photos if isinstance(photos, list) else []

    @property
    def profit(self):
        return self.price - self.seller_price

    def to_dict(self):
        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "seller_name": self.seller.name if self.seller else None,
            "title": self.title,
            "category": self.category,
            "brand": self.brand,
            "model": self.model_name,
            "condition": self.condition.value,
            "seller_price": self.seller_price,
            "price": self.price,
            "location": self.location,
            "description": self.description,
            "status": self.status.value,
            "working_parts": self.working_parts,
            "photos": self.photo_list,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class BuyRequest(db.Model):
    __tablename__ = "buy_requests"

    id         = db.Column(db.Integer, primary_key=True)
    listing_id = db.Column(db.Integer, db.ForeignKey("listings.id"), nullable=False, index=True)
    buyer_id   = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    seller_id  = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    status     = db.Column(SAEnum(RequestStatus), nullable=False, default=RequestStatus.pending, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    listing = db.relationship("Listing", back_populates="requests")
    buyer   = db.relationship("User", foreign_keys=[buyer_id], back_populates="sent_requests")
    seller  = db.relationship("User", foreign_keys=[seller_id])
    order   = db.relationship(
        "Order", back_populates="request", uselist=False, cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "listing_id": self.listing_id,
            "buyer_id": self.buyer_id,
            "seller_id": self.seller_id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Order(db.Model):
    __tablename__ = "orders"

    id               = db.Column(db.Integer, primary_key=True)
    request_id       = db.Column(db.Integer, db.ForeignKey("buy_requests.id"), nullable=False, unique=True)
    shipping_name    = db.Column(db.String(120), nullable=False)
    shipping_email   = db.Column(db.String(120), nullable=False)
    shipping_phone   = db.Column(db.String(20), nullable=False)
    shipping_address = db.Column(db.Text, nullable=False)
    shipping_pincode = db.Column(db.String(12), nullable=False)
    payment_method   = db.Column(SAEnum(PaymentMethod), nullable=False)
    created_at       = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    request = db.relationship("BuyRequest", back_populates="order")

    def to_dict(self):
        return {
            "id": self.id,
            "request_id": self.request_id,
            "shipping_name": self.shipping_name,
            "shipping_email": self.shipping_email,
            "shipping_phone": self.shipping_phone,
            "shipping_address": self.shipping_address,
            "shipping_pincode": self.shipping_pincode,
            "payment_method": self.payment_method.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
