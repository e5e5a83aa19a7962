# dealership/models.py
"""SQLAlchemy ORM models for persisted entities.

Defines cars with their gallery images, plus the users and login sessions
used by the admin area.
"""
from sqlalchemy import (
    Column, Integer, Text, Numeric, Boolean, TIMESTAMP, ForeignKey, func, true, Index
)
from sqlalchemy.orm import relationship
from .db import Base

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"


class Car(Base):
    __tablename__ = "cars"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text)
    make = Column(Text, nullable=False)
    model = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2))
    mileage = Column(Integer)
    condition = Column(Text, nullable=False)
    location = Column(Text)
    description = Column(Text)
    image_url = Column(Text)
    transmission = Column(Text)
    engine_cc = Column(Integer)
    is_available = Column(Boolean, nullable=False, default=True, server_default=true())
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    images = relationship(
        "CarImage",
        back_populates="car",
        order_by="CarImage.display_order",
        cascade="all, delete-orphan",
    )


class CarImage(Base):
    __tablename__ = "car_images"
    id = Column(Integer, primary_key=True, index=True)
    car_id = Column(Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(Text, nullable=False)
    description = Column(Text)
    display_order = Column(Integer, nullable=False, default=0)

    car = relationship("Car", back_populates="images")


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(Text, nullable=False, unique=True, index=True)
    full_name = Column(Text, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default=ROLE_CUSTOMER)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


class UserSession(Base):
    __tablename__ = "sessions"
    id = Column(Integer, primary_key=True)
    token = Column(Text, nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)

    user = relationship("User")

Index("idx_cars_available_created", Car.is_available, Car.created_at)
