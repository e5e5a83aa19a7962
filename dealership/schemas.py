# dealership/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class CarBase(BaseModel):
    title: Optional[str] = None
    make: str
    model: str
    year: int
    price: Optional[float] = None
    mileage: Optional[int] = None
    condition: str
    location: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    transmission: Optional[str] = None
    engine_cc: Optional[int] = None

class CarForm(BaseModel):
    """Admin add/edit form; required fields are checked by services.validate_car_form."""
    title: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    price: Optional[float] = None
    mileage: Optional[int] = None
    condition: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    transmission: Optional[str] = None
    engine_cc: Optional[int] = None
    image_urls: List[str] = Field(default_factory=list)

class AvailabilityUpdate(BaseModel):
    is_available: bool

class CarImageOut(BaseModel):
    id: int
    image_url: str
    description: Optional[str] = None
    display_order: int
    class Config:
        from_attributes = True

class CarOut(CarBase):
    id: int
    is_available: bool
    display_title: str
    price_display: str
    mileage_display: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CarDetailOut(CarOut):
    images: List[CarImageOut] = Field(default_factory=list)

class ListingViewOut(BaseModel):
    cars: List[CarOut]
    makes: List[str]
    conditions: List[str]
    total: int
    summary: str
    notice: Optional[str] = None

class ContactOut(BaseModel):
    car_title: str
    phone: str
    email: str
    call: str
    whatsapp: str
    mailto: str
    sms: str

class RejectedImage(BaseModel):
    filename: str
    detail: str

class UploadOut(BaseModel):
    urls: List[str]
    rejected: List[RejectedImage] = Field(default_factory=list)

class SignUp(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6)
    full_name: str = ""

class SignIn(BaseModel):
    email: str
    password: str

class UserOut(BaseModel):
    id: int
    email: str
    full_name: str
    is_admin: bool

class SignInOut(BaseModel):
    session_token: str
    expires_at: datetime
    user: UserOut
