from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "dailyguess")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    redis_url: str = os.getenv("REDIS_URL", "redis://redis:6379/0")
    redis_namespace: str = os.getenv("REDIS_NAMESPACE", "dailyguess")
    s3_endpoint: str = os.getenv("S3_ENDPOINT", "http://minio:9000")
    s3_access_key: str = os.getenv("S3_ACCESS_KEY", "minioadmin")
    s3_secret_key: str = os.getenv("S3_SECRET_KEY", "minioadmin")
    s3_bucket_images: str = os.getenv("S3_BUCKET_IMAGES", "dailyguess-images-dev")
    # Base for public image URLs; the bucket name is appended
    s3_public_url: str = os.getenv("S3_PUBLIC_URL", "http://localhost:9000")

    # Registration throttling
    rate_limit_max_attempts: int = int(os.getenv("RATE_LIMIT_MAX_ATTEMPTS", "3"))
    rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "86400"))  # 24h

    # Participant identifiers, e.g. QZ-1A2B3C4D
    participant_id_prefix: str = os.getenv("PARTICIPANT_ID_PREFIX", "QZ")
    participant_id_length: int = int(os.getenv("PARTICIPANT_ID_LENGTH", "8"))
    participant_id_max_attempts: int = int(os.getenv("PARTICIPANT_ID_MAX_ATTEMPTS", "10"))
    participant_id_retry_delay_ms: int = int(os.getenv("PARTICIPANT_ID_RETRY_DELAY_MS", "5"))

settings = Settings()
