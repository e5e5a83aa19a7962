# dealership/config.py
"""Application settings read from the environment (and `.env`)."""
import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _normalize_db_url(url: Optional[str]) -> Optional[str]:
    # SQLAlchemy 2.x doesn't accept 'postgres://'
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


@dataclass
class StorageConfig:
    """Blob storage for listing images."""
    bucket: str = field(default_factory=lambda: os.getenv("S3_BUCKET", "car-images"))
    endpoint_url: Optional[str] = field(default_factory=lambda: os.getenv("S3_ENDPOINT_URL"))
    region: str = field(default_factory=lambda: os.getenv("S3_REGION", "us-east-1"))
    public_base_url: Optional[str] = field(default_factory=lambda: os.getenv("S3_PUBLIC_BASE_URL"))
    max_image_bytes: int = field(default_factory=lambda: int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024))))
    max_images_per_upload: int = field(default_factory=lambda: int(os.getenv("MAX_IMAGES_PER_UPLOAD", "5")))

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


@dataclass
class ContactConfig:
    """Seller contact details shown on every listing."""
    phone: str = field(default_factory=lambda: os.getenv("CONTACT_PHONE", "0704400418"))
    email: str = field(default_factory=lambda: os.getenv("CONTACT_EMAIL", "sales@example.com"))
    country_code: str = field(default_factory=lambda: os.getenv("CONTACT_COUNTRY_CODE", "254"))


@dataclass
class Settings:
    database_url: Optional[str] = field(default_factory=lambda: _normalize_db_url(os.getenv("DATABASE_URL")))
    db_pool_size: int = field(default_factory=lambda: int(os.getenv("DB_POOL_SIZE", "5")))
    db_max_overflow: int = field(default_factory=lambda: int(os.getenv("DB_MAX_OVERFLOW", "10")))
    cors_origins: str = field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*"))
    session_ttl_days: int = field(default_factory=lambda: int(os.getenv("SESSION_TTL_DAYS", "7")))
    currency: str = field(default_factory=lambda: os.getenv("CURRENCY", "KES"))
    storage: StorageConfig = field(default_factory=StorageConfig)
    contact: ContactConfig = field(default_factory=ContactConfig)

    def get_origins_list(self) -> List[str]:
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
