from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    forwarded_allow_ips: str = "127.0.0.1"  # Proxies trusted for X-Forwarded-For
    debug: bool = False
    production: bool = False  # Marks cookies as Secure
    identity_provider_url: str  # Base URL of the identity provider, e.g. https://xyz.supabase.co
    identity_provider_key: str  # Publishable key sent as the `apikey` header
    storage_endpoint: str  # S3-compatible endpoint, e.g. https://<account>.r2.cloudflarestorage.com
    storage_access_key_id: str
    storage_secret_access_key: str
    storage_region: str = "auto"
    media_bucket: str = "event-media"
    signed_url_ttl_seconds: int = 900
    upload_url_ttl_seconds: int = 300
    organizer_session_ttl_days: int = 30
    trusted_origins: list[str] = []  # CSRF allow-list, also used for CORS
    external_timeout_seconds: float = 10.0  # Identity provider and storage calls
    enable_event_status_scheduler: bool = False
    event_open_early_hours: int = 13
    event_close_late_hours: int = 13
    internal_api_key: str | None = None  # Enables the internal event-status-sync endpoint
    guest_max_uploads: int = 50
    guest_max_file_size: int = 50 * 1024 * 1024
    pin_max_failed_attempts: int = 5
    pin_attempt_window_seconds: int = 15 * 60

    model_config = {
        "env_file": [".env"],
        "env_prefix": "EVENTCAM_",
        "extra": "ignore",
    }
