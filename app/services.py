# app/services.py
import math
from . import crud, schemas
from sqlalchemy.orm import Session
from .models import Listing, User, STATUS_SOLD, PRIORITY_BOOSTED, PRIORITY_NORMAL
from .prefix_index import PrefixIndexHolder, event_index
from .security import hash_password, verify_password, create_token
from .utils import logger
from typing import Dict, List, Optional

PASS_TYPES = ("Male", "Female", "Couple", "Group", "Other")


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class ValidationFailed(ServiceError):
    pass

class UserExists(ServiceError):
    pass

class InvalidCredentials(ServiceError):
    pass

class ListingNotFound(ServiceError):
    status_code = 404

class NotListingOwner(ServiceError):
    status_code = 403

class ListingAlreadySold(ServiceError):
    pass


def _auth_response(user: User) -> Dict:
    return {
        "token": create_token(user.id, user.email),
        "user": {"id": user.id, "email": user.email},
    }

def signup(db: Session, payload: schemas.SignupRequest) -> Dict:
    if not payload.email or not payload.password or not payload.phone_number:
        raise ValidationFailed("Please provide email, password, and phone number.")
    if crud.get_user_by_email(db, payload.email):
        raise UserExists("User already exists.")
    user = crud.create_user(db, payload.email, hash_password(payload.password), payload.phone_number)
    logger.info("Registered user %s", user.id)
    return _auth_response(user)

def login(db: Session, payload: schemas.LoginRequest) -> Dict:
    if not payload.email or not payload.password:
        raise ValidationFailed("Please provide email and password.")
    user = crud.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise InvalidCredentials("Invalid credentials.")
    return _auth_response(user)

def create_listing(db: Session, seller: User, payload: schemas.ListingCreate) -> Listing:
    required = (
        payload.event_name, payload.city, payload.pass_type,
        payload.seller_phone_number, payload.available_dates,
    )
    if not all(required) or payload.price is None:
        raise ValidationFailed("Please fill all required fields.")
    if not math.isfinite(payload.price):
        raise ValidationFailed("Price must be a number.")
    if payload.price < 0:
        raise ValidationFailed("Price must not be negative.")
    if payload.pass_type not in PASS_TYPES:
        raise ValidationFailed(f"Pass type must be one of: {', '.join(PASS_TYPES)}.")
    data = payload.model_dump(exclude={"is_boosted"})
    data["tags"] = data.get("tags") or []
    data["priority"] = PRIORITY_BOOSTED if payload.is_boosted else PRIORITY_NORMAL
    listing = crud.create_listing(db, seller.id, data)
    logger.info("Created listing %s for seller %s (priority=%d)", listing.id, seller.id, listing.priority)
    return listing

def browse_listings(db: Session, filters: Optional[Dict] = None,
                    index: PrefixIndexHolder = event_index) -> List[Listing]:
    """Ranked available listings; an unfiltered read also refreshes the prefix index."""
    active = {k: v for k, v in (filters or {}).items() if v}
    listings = crud.search_listings(db, active)
    if not active:
        index.rebuild(crud.event_name_index(db))
    return listings

def _get_listing_or_raise(db: Session, listing_id: str) -> Listing:
    listing = crud.get_listing(db, listing_id)
    if not listing:
        raise ListingNotFound("Listing not found.")
    return listing

def mark_sold(db: Session, user: User, listing_id: str) -> Listing:
    listing = _get_listing_or_raise(db, listing_id)
    if listing.seller_id != user.id:
        raise NotListingOwner("User not authorized to modify this listing.")
    if listing.status == STATUS_SOLD:
        raise ListingAlreadySold("Listing is already marked as sold.")
    listing = crud.mark_listing_sold(db, listing)
    logger.info("Listing %s marked as sold", listing.id)
    return listing

def reveal_contact(db: Session, user: User, listing_id: str) -> Dict:
    listing = _get_listing_or_raise(db, listing_id)
    if crud.add_purchase(db, user.id, listing.id):
        logger.info("User %s revealed contact for listing %s", user.id, listing.id)
    return {"phone_number": listing.seller_phone_number, "seller_id": listing.seller_id}
