# app/schemas.py
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime, timezone


class CamelModel(BaseModel):
    # JSON uses the camelCase names of the public API
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SignupRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None

class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None

class UserOut(CamelModel):
    id: str
    email: str

class AuthResponse(CamelModel):
    token: str
    user: UserOut

class ListingCreate(CamelModel):
    event_name: Optional[str] = None
    city: Optional[str] = None
    pass_type: Optional[str] = None
    price: Optional[float] = None
    seller_phone_number: Optional[str] = None
    available_dates: Optional[List[str]] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    is_boosted: bool = False

class ListingOut(CamelModel):
    id: str
    seller_id: str
    event_name: str
    city: str
    pass_type: str
    status: str
    price: float
    available_dates: List[str]
    tags: List[str] = []
    description: Optional[str] = None
    created_at: datetime
    priority: int

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without an offset; they are stored in UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

class EventNameEntry(CamelModel):
    name: str
    ids: List[str]

class AutocompleteOut(CamelModel):
    prefix: str
    count: int
    ids: List[str]

class ContactOut(CamelModel):
    phone_number: str
    seller_id: str
