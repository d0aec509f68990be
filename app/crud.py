# app/crud.py
"""Store access for users, listings and purchases.

`search_listings` is the filter gateway behind the listing browse endpoint:
it always restricts to available passes and hands the matches to the
ranking heap, so callers never see the database's native order.
"""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
from .models import Listing, ListingDate, Purchase, User, STATUS_AVAILABLE, STATUS_SOLD
from .ranking import rank_listings
from .db import contains_folded

def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def create_user(db: Session, email: str, password_hash: str, phone_number: str) -> User:
    user = User(email=email, password_hash=password_hash, phone_numbers=[phone_number])
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def create_listing(db: Session, seller_id: str, data: Dict[str, Any]) -> Listing:
    dates = data.pop("available_dates", [])
    obj = Listing(seller_id=seller_id, **data)
    obj.dates = [ListingDate(position=i, date=d) for i, d in enumerate(dates)]
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def get_listing(db: Session, listing_id: str) -> Optional[Listing]:
    return db.get(Listing, listing_id)

def search_listings(db: Session, filters: Dict = None) -> List[Listing]:
    q = db.query(Listing).filter(Listing.status == STATUS_AVAILABLE)
    if filters:
        if filters.get("city"):
            q = q.filter(Listing.city == filters["city"])
        if filters.get("pass_type"):
            q = q.filter(Listing.pass_type == filters["pass_type"])
        if filters.get("date"):
            q = q.filter(Listing.dates.any(ListingDate.date == filters["date"]))
        if filters.get("q"):
            q = q.filter(contains_folded(Listing.event_name, filters["q"]))
    return rank_listings(q.all())

def list_seller_listings(db: Session, seller_id: str) -> List[Listing]:
    return (
        db.query(Listing)
        .filter(Listing.seller_id == seller_id)
        .order_by(Listing.created_at.desc())
        .all()
    )

def event_name_index(db: Session) -> List[Dict[str, Any]]:
    """Group available listing ids by event name: ``[{"name", "ids"}]``."""
    rows = db.execute(
        select(Listing.event_name, Listing.id)
        .where(Listing.status == STATUS_AVAILABLE)
        .order_by(Listing.event_name, Listing.id)
    ).all()
    grouped: Dict[str, List[str]] = {}
    for name, listing_id in rows:
        grouped.setdefault(name, []).append(listing_id)
    return [{"name": name, "ids": ids} for name, ids in grouped.items()]

def mark_listing_sold(db: Session, listing: Listing) -> Listing:
    listing.status = STATUS_SOLD
    db.commit()
    db.refresh(listing)
    return listing

def add_purchase(db: Session, user_id: str, listing_id: str) -> bool:
    """Record a contact reveal; returns False if the user already had one."""
    exists = (
        db.query(Purchase)
        .filter(Purchase.user_id == user_id, Purchase.listing_id == listing_id)
        .first()
    )
    if exists:
        return False
    db.add(Purchase(user_id=user_id, listing_id=listing_id))
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent reveal by the same user
        db.rollback()
        return False
    return True
