# app/api/routes.py
import os
from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import jwt
from .. import crud, schemas, services
from ..db import get_db
from ..models import User
from ..prefix_index import event_index
from ..security import decode_token

AUTOCOMPLETE_MIN_PREFIX = int(os.getenv("AUTOCOMPLETE_MIN_PREFIX", "2"))

router = APIRouter(prefix="/api")


def current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    token = authorization.split(" ")[1] if authorization and " " in authorization else None
    if not token:
        raise HTTPException(status_code=401, detail="No token, authorization denied.")
    try:
        payload = decode_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=400, detail="Token is not valid.")
    user = crud.get_user(db, payload.get("id", ""))
    if not user:
        raise HTTPException(status_code=400, detail="Token is not valid.")
    return user


@router.get("/health")
def health():
    return {"status": "ok"}

@router.post("/auth/signup", response_model=schemas.AuthResponse, status_code=201)
def signup(payload: schemas.SignupRequest, db: Session = Depends(get_db)):
    return services.signup(db, payload)

@router.post("/auth/login", response_model=schemas.AuthResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    return services.login(db, payload)

@router.get("/listings", response_model=List[schemas.ListingOut])
def listings(
    city: str | None = Query(None),
    pass_type: str | None = Query(None, alias="passType"),
    date: str | None = Query(None),
    q: str | None = Query(None),
    db: Session = Depends(get_db)
):
    filters = {
        "city": city,
        "pass_type": pass_type,
        "date": date,
        "q": q
    }
    return services.browse_listings(db, filters)

@router.get("/listings/event-names", response_model=List[schemas.EventNameEntry])
def event_names(db: Session = Depends(get_db)):
    return crud.event_name_index(db)

@router.get("/listings/autocomplete", response_model=schemas.AutocompleteOut)
def autocomplete(prefix: str = ""):
    # very short prefixes match too broadly to be useful
    if len(prefix) < AUTOCOMPLETE_MIN_PREFIX:
        ids = set()
    else:
        ids = event_index.lookup(prefix)
    return {"prefix": prefix, "count": len(ids), "ids": sorted(ids)}

@router.post("/listings", response_model=schemas.ListingOut, status_code=201)
def create_listing(
    payload: schemas.ListingCreate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db)
):
    return services.create_listing(db, user, payload)

@router.get("/listings/my-listings", response_model=List[schemas.ListingOut])
def my_listings(user: User = Depends(current_user), db: Session = Depends(get_db)):
    return crud.list_seller_listings(db, user.id)

@router.put("/listings/{listing_id}/sold", response_model=schemas.ListingOut)
def mark_sold(listing_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)):
    return services.mark_sold(db, user, listing_id)

@router.get("/listings/{listing_id}/contact", response_model=schemas.ContactOut)
def contact(listing_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)):
    return services.reveal_contact(db, user, listing_id)
