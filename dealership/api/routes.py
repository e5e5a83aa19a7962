# dealership/api/routes.py
from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
from .. import auth, crud, schemas, services
from ..auth import SessionContext
from ..config import Settings
from ..contact import contact_links
from ..db import get_db
from ..listing import ALL, FilterCriteria, SortKey, display_title
from ..storage import ImageFile, ImageStorage, StorageError
from ..utils import logger

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_storage(request: Request) -> ImageStorage:
    return request.app.state.storage


@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/cars", response_model=schemas.ListingViewOut)
def listings(
    search: str = Query(""),
    make: str = Query(ALL),
    condition: str = Query(ALL),
    sort: SortKey = Query(SortKey.PRICE_ASC),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    criteria = FilterCriteria(search=search, make=make, condition=condition, sort=sort)
    return services.browse_listings(db, criteria, settings.currency)


def _car_or_404(db: Session, car_id: int):
    try:
        car = crud.get_car(db, car_id)
    except SQLAlchemyError:
        logger.exception("Fetching car %s failed", car_id)
        raise HTTPException(status_code=500, detail="Failed to fetch vehicle details. Please try again.")
    if not car:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return car

@router.get("/cars/{car_id}", response_model=schemas.CarDetailOut)
def get_car(car_id: int, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return services.car_out(_car_or_404(db, car_id), settings.currency, detail=True)

@router.get("/cars/{car_id}/contact", response_model=schemas.ContactOut)
def get_contact(car_id: int, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    car = _car_or_404(db, car_id)
    return contact_links(display_title(car), settings.contact)


def _user_out(context: SessionContext) -> schemas.UserOut:
    user = context.user
    return schemas.UserOut(id=user.id, email=user.email, full_name=user.full_name, is_admin=context.is_admin)

@router.post("/auth/signup", response_model=schemas.UserOut, status_code=201)
def signup(payload: schemas.SignUp, db: Session = Depends(get_db)):
    try:
        user = auth.sign_up(db, payload.email, payload.password, payload.full_name)
    except auth.DuplicateAccount as e:
        raise HTTPException(status_code=409, detail=str(e))
    except auth.AuthError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _user_out(SessionContext.load(user))

@router.post("/auth/signin", response_model=schemas.SignInOut)
def signin(payload: schemas.SignIn, response: Response, db: Session = Depends(get_db),
           settings: Settings = Depends(get_settings)):
    try:
        user, session = auth.sign_in(db, payload.email, payload.password, settings.session_ttl_days)
    except auth.AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    response.set_cookie(auth.SESSION_COOKIE, session.token, httponly=True, samesite="lax",
                        max_age=settings.session_ttl_days * 24 * 3600)
    return schemas.SignInOut(session_token=session.token, expires_at=session.expires_at,
                             user=_user_out(SessionContext.load(user)))

@router.post("/auth/signout")
def signout(response: Response, context: SessionContext = Depends(auth.require_user),
            db: Session = Depends(get_db)):
    auth.sign_out(db, context.user)
    response.delete_cookie(auth.SESSION_COOKIE)
    return {"message": "Signed out successfully"}

@router.get("/auth/me", response_model=schemas.UserOut)
def me(context: SessionContext = Depends(auth.require_user)):
    return _user_out(context)


@router.get("/admin/cars", response_model=List[schemas.CarOut])
def admin_cars(_: SessionContext = Depends(auth.require_admin), db: Session = Depends(get_db),
               settings: Settings = Depends(get_settings)):
    try:
        cars = crud.list_all_cars(db)
    except SQLAlchemyError:
        logger.exception("Fetching cars failed")
        raise HTTPException(status_code=500, detail="Failed to fetch cars. Please try again.")
    return [services.car_out(c, settings.currency) for c in cars]

def _save(db: Session, form: schemas.CarForm, context: SessionContext, settings: Settings, car_id=None):
    try:
        car = services.save_car(db, form, owner_id=context.user.id, car_id=car_id)
    except services.ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Saving car failed")
        raise HTTPException(status_code=500, detail="Failed to save car. Please try again.")
    if not car:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return services.car_out(car, settings.currency, detail=True)

@router.post("/admin/cars", response_model=schemas.CarDetailOut, status_code=201)
def add_car(form: schemas.CarForm, context: SessionContext = Depends(auth.require_admin),
            db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return _save(db, form, context, settings)

@router.put("/admin/cars/{car_id}", response_model=schemas.CarDetailOut)
def edit_car(car_id: int, form: schemas.CarForm, context: SessionContext = Depends(auth.require_admin),
             db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return _save(db, form, context, settings, car_id=car_id)

@router.patch("/admin/cars/{car_id}/availability", response_model=schemas.CarOut)
def set_availability(car_id: int, payload: schemas.AvailabilityUpdate,
                     _: SessionContext = Depends(auth.require_admin),
                     db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    try:
        car = crud.set_availability(db, car_id, payload.is_available)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Updating availability of car %s failed", car_id)
        raise HTTPException(status_code=500, detail="Failed to update car. Please try again.")
    if not car:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return services.car_out(car, settings.currency)

@router.delete("/admin/cars/{car_id}")
def delete_car(car_id: int, _: SessionContext = Depends(auth.require_admin), db: Session = Depends(get_db)):
    try:
        ok = crud.delete_car(db, car_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Deleting car %s failed", car_id)
        raise HTTPException(status_code=500, detail="Failed to delete car. Please try again.")
    if not ok:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    logger.info("Deleted car %s", car_id)
    return {"status": "deleted"}

@router.post("/admin/images", response_model=schemas.UploadOut)
def upload_images(files: List[UploadFile] = File(...), context: SessionContext = Depends(auth.require_admin),
                  storage: ImageStorage = Depends(get_storage)):
    images = [ImageFile(filename=f.filename or "", content_type=f.content_type, content=f.file.read())
              for f in files]
    try:
        urls, rejected = storage.upload_many(context.user.id, images)
    except StorageError:
        raise HTTPException(status_code=502, detail="Failed to upload some images. Please try again.")
    if rejected and not urls:
        _, reason = rejected[0]
        raise HTTPException(status_code=reason.status_code, detail=str(reason))
    return {"urls": urls, "rejected": [{"filename": name, "detail": str(reason)} for name, reason in rejected]}
