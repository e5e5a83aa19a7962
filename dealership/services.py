# dealership/services.py
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, schemas
from .listing import FilterCriteria, derive_view, display_title, format_price, format_mileage
from .models import Car
from .utils import logger

REQUIRED_FIELDS = ("title", "make", "model", "year", "condition")
FETCH_FAILED = "Failed to fetch vehicles. Please try again."


class ValidationError(ValueError):
    pass


def validate_car_form(form: schemas.CarForm) -> Dict:
    """Check the admin form and return the column values to save."""
    data = form.model_dump(exclude={"image_urls"})
    for key in ("title", "make", "model", "condition", "location", "description",
                "image_url", "transmission"):
        if isinstance(data[key], str):
            data[key] = data[key].strip() or None
    missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Please fill in all required fields: {', '.join(missing)}")
    if not 1900 <= data["year"] <= date.today().year + 1:
        raise ValidationError("Please enter a valid year")
    for key in ("price", "mileage", "engine_cc"):
        if data[key] is not None and data[key] < 0:
            raise ValidationError(f"Please enter a valid {key.replace('_', ' ')}")
    if form.image_urls:
        data["image_url"] = form.image_urls[0]
    return data


def car_out(car: Car, currency: str, detail: bool = False):
    values = {name: getattr(car, name) for name in crud.CAR_FIELDS}
    values.update(
        id=car.id,
        is_available=car.is_available,
        created_at=car.created_at,
        updated_at=car.updated_at,
        display_title=display_title(car),
        price_display=format_price(car.price, currency),
        mileage_display=format_mileage(car.mileage),
    )
    if detail:
        values["images"] = [schemas.CarImageOut.model_validate(img) for img in car.images]
        return schemas.CarDetailOut(**values)
    return schemas.CarOut(**values)


def browse_listings(db: Session, criteria: FilterCriteria, currency: str) -> schemas.ListingViewOut:
    notice: Optional[str] = None
    try:
        cars: List[Car] = crud.list_available_cars(db)
    except SQLAlchemyError:
        logger.exception("Fetching available cars failed")
        cars, notice = [], FETCH_FAILED
    view = derive_view(cars, criteria)
    return schemas.ListingViewOut(
        cars=[car_out(c, currency) for c in view.cars],
        makes=view.makes,
        conditions=view.conditions,
        total=view.total,
        summary=view.summary,
        notice=notice,
    )


def save_car(db: Session, form: schemas.CarForm, owner_id: int, car_id: Optional[int] = None) -> Optional[Car]:
    data = validate_car_form(form)
    if car_id is None:
        car = crud.create_car(db, data, owner_id=owner_id, image_urls=form.image_urls)
        logger.info("Added car %s (%s %s)", car.id, car.make, car.model)
        return car
    car = crud.update_car(db, car_id, data, image_urls=form.image_urls)
    if car:
        logger.info("Updated car %s", car.id)
    return car
