"""Application configuration loaded from environment variables."""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    ENVIRONMENT: str = "development"

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    API_V1_PREFIX: str = "/api/v1"

    # Database timeouts
    DB_POOL_TIMEOUT_SECONDS: int = 30
    DB_CONNECT_TIMEOUT_SECONDS: int = 10
    DB_STATEMENT_TIMEOUT_MS: int = 15000

    # Supabase (admin JWT validation + seller auth principals)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_TIMEOUT_SECONDS: int = 10

    # Seller codes
    SELLER_EMAIL_DOMAIN: str = "seller.local"
    SITE_URL: str = "http://localhost:3000"
    ADMIN_ROLES: List[str] = ["admin", "superadmin"]

    # Fixed-window rate limiting, per client address
    RATE_LIMIT_CAPACITY: int = 5
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # S3-compatible blob storage (Supabase Storage, MinIO, ...)
    BLOB_STORAGE_ENDPOINT: str = ""
    BLOB_STORAGE_REGION: str = "us-east-1"
    BLOB_STORAGE_ACCESS_KEY: str = ""
    BLOB_STORAGE_SECRET_KEY: str = ""
    BLOB_STORAGE_BUCKET: str = "listing-images"
    BLOB_PUBLIC_BASE_URL: str = ""
    BLOB_PRESIGN_EXPIRY_SECONDS: int = 900
    BLOB_CONNECT_TIMEOUT_SECONDS: int = 5
    BLOB_READ_TIMEOUT_SECONDS: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
