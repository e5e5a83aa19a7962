# dealership/crud.py
"""CRUD operations for cars, their images, users and login sessions.

These helpers are the only place that talks to the ORM; they commit their
own writes and return ORM objects (or None / False when a row is missing).
"""
from datetime import datetime, timezone
from sqlalchemy import select, delete
from .models import Car, CarImage, User, UserSession
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional

CAR_FIELDS = (
    "title", "make", "model", "year", "price", "mileage", "condition",
    "location", "description", "image_url", "transmission", "engine_cc",
)


def list_available_cars(db: Session) -> List[Car]:
    stmt = (
        select(Car)
        .where(Car.is_available.is_(True))
        .order_by(Car.created_at.desc(), Car.id.desc())
    )
    return list(db.scalars(stmt))

def list_all_cars(db: Session) -> List[Car]:
    return list(db.scalars(select(Car).order_by(Car.created_at.desc(), Car.id.desc())))

def get_car(db: Session, car_id: int) -> Optional[Car]:
    return db.get(Car, car_id)

def create_car(db: Session, data: Dict[str, Any], owner_id: Optional[int] = None,
               image_urls: Optional[List[str]] = None) -> Car:
    car = Car(**{k: v for k, v in data.items() if k in CAR_FIELDS}, owner_id=owner_id, is_available=True)
    for order, url in enumerate(image_urls or []):
        car.images.append(CarImage(image_url=url, display_order=order))
    db.add(car)
    db.commit()
    db.refresh(car)
    return car

def update_car(db: Session, car_id: int, updates: Dict[str, Any],
               image_urls: Optional[List[str]] = None) -> Optional[Car]:
    car = db.get(Car, car_id)
    if not car:
        return None
    for k, v in updates.items():
        if k in CAR_FIELDS:
            setattr(car, k, v)
    if image_urls:
        start = len(car.images)
        for offset, url in enumerate(image_urls):
            car.images.append(CarImage(image_url=url, display_order=start + offset))
    db.commit()
    db.refresh(car)
    return car

def set_availability(db: Session, car_id: int, is_available: bool) -> Optional[Car]:
    car = db.get(Car, car_id)
    if not car:
        return None
    car.is_available = is_available
    db.commit()
    db.refresh(car)
    return car

def delete_car(db: Session, car_id: int) -> bool:
    car = db.get(Car, car_id)
    if not car:
        return False
    db.delete(car)
    db.commit()
    return True


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email.strip().lower())).first()

def create_user(db: Session, email: str, full_name: str, password_hash: str, role: str) -> User:
    user = User(email=email.strip().lower(), full_name=full_name, password_hash=password_hash, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def set_role(db: Session, email: str, role: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user:
        return None
    user.role = role
    db.commit()
    db.refresh(user)
    return user

def create_session(db: Session, user_id: int, token: str, expires_at: datetime) -> UserSession:
    session = UserSession(token=token, user_id=user_id, expires_at=expires_at)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session

def get_session(db: Session, token: str) -> Optional[UserSession]:
    return db.scalars(select(UserSession).where(UserSession.token == token)).first()

def delete_session(db: Session, token: str) -> None:
    db.execute(delete(UserSession).where(UserSession.token == token))
    db.commit()

def delete_sessions_for_user(db: Session, user_id: int) -> None:
    db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    db.commit()

def purge_expired_sessions(db: Session, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    result = db.execute(delete(UserSession).where(UserSession.expires_at < now))
    db.commit()
    return result.rowcount
