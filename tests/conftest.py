# tests/conftest.py
import os

# use a throwaway in-memory database for every test run
os.environ["DATABASE_URL"] = "sqlite://"

import boto3
import pytest
from botocore.stub import Stubber
from fastapi.testclient import TestClient

from dealership import auth, crud
from dealership.config import ContactConfig, Settings, StorageConfig
from dealership.db import Base, engine, SessionLocal
from dealership.main import create_app
from dealership.models import ROLE_ADMIN
from dealership.storage import ImageStorage


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        currency="KES",
        storage=StorageConfig(bucket="car-images", region="us-east-1",
                              public_base_url="https://cdn.example.com/car-images"),
        contact=ContactConfig(phone="0704400418", email="sales@example.com", country_code="254"),
    )


@pytest.fixture
def s3_stub(settings):
    client = boto3.client("s3", region_name="us-east-1",
                          aws_access_key_id="test", aws_secret_access_key="test")
    with Stubber(client) as stubber:
        yield client, stubber


@pytest.fixture
def client(db, settings, s3_stub):
    s3_client, _ = s3_stub
    app = create_app(settings=settings, storage=ImageStorage(settings.storage, client=s3_client))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client, db):
    auth.sign_up(db, "admin@example.com", "secret123", "Site Admin")
    crud.set_role(db, "admin@example.com", ROLE_ADMIN)
    res = client.post("/auth/signin", json={"email": "admin@example.com", "password": "secret123"})
    assert res.status_code == 200
    return client


@pytest.fixture
def make_car(db):
    def _make(**overrides):
        data = {
            "title": "2023 BMW M3 Competition", "make": "BMW", "model": "M3", "year": 2023,
            "price": 750000, "mileage": 12000, "condition": "Excellent", "location": "Nairobi",
        }
        data.update(overrides)
        return crud.create_car(db, data)
    return _make
