# app/models.py
"""SQLAlchemy ORM models for persisted entities.

Users, the passes they list, the dates each pass is valid on, and the
contact reveals ("purchases") buyers have paid for.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, Text, String, Numeric, DateTime, JSON, ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from .db import Base

STATUS_AVAILABLE = "available"
STATUS_SOLD = "sold"

PRIORITY_NORMAL = 1
PRIORITY_BOOSTED = 10


def _new_id():
    return uuid.uuid4().hex


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=_new_id)
    email = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    phone_numbers = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    listings = relationship("Listing", back_populates="seller")
    purchases = relationship("Purchase", back_populates="user", cascade="all, delete-orphan")


class Listing(Base):
    __tablename__ = "listings"
    id = Column(String(32), primary_key=True, default=_new_id)
    seller_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    event_name = Column(Text, nullable=False)
    city = Column(Text, nullable=False, index=True)
    pass_type = Column(Text, nullable=False, index=True)
    status = Column(String(16), nullable=False, default=STATUS_AVAILABLE, index=True)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    seller_phone_number = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    priority = Column(Integer, nullable=False, default=PRIORITY_NORMAL)

    seller = relationship("User", back_populates="listings")
    dates = relationship(
        "ListingDate",
        order_by="ListingDate.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def available_dates(self):
        return [d.date for d in self.dates]


class ListingDate(Base):
    __tablename__ = "listing_dates"
    id = Column(Integer, primary_key=True)
    listing_id = Column(String(32), ForeignKey("listings.id"), nullable=False)
    position = Column(Integer, nullable=False)
    date = Column(Text, nullable=False)


class Purchase(Base):
    __tablename__ = "purchases"
    __table_args__ = (UniqueConstraint("user_id", "listing_id", name="uq_purchase_user_listing"),)
    id = Column(Integer, primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    listing_id = Column(String(32), ForeignKey("listings.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    user = relationship("User", back_populates="purchases")
    listing = relationship("Listing")

Index("idx_listing_dates_date", ListingDate.date, ListingDate.listing_id)
Index("idx_listings_status_event", Listing.status, Listing.event_name)
