"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Shared secret used to verify access tokens issued by the identity provider",
        min_length=1,
    )
    jwt_algorithm: str = Field(default="HS256", description="Access token signing algorithm")
    internal_api_key: str = Field(
        description="Key expected in the X-Internal-Key header for service-to-service calls",
        min_length=1,
    )
    app_timezone: str = Field(default="UTC", description="Timezone used for stored datetimes")
    log_level: str = Field(default="INFO", description="Level for the listing_alerts loggers")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    firebase_project_id: str | None = Field(
        default=None, description="Firebase project that owns the messaging credentials"
    )
    firebase_client_email: str | None = Field(
        default=None, description="Service account email for Firebase Cloud Messaging"
    )
    firebase_private_key: str | None = Field(
        default=None,
        description="Service account private key; literal \\n sequences are expanded",
    )
    firebase_app_name: str = Field(
        default="listing-alerts",
        description="Name of the firebase_admin App instance owned by this process",
        min_length=1,
    )

    listing_alert_title: str = Field(default="New Vehicle Near You! 🚗", min_length=1)
    listing_alert_body_template: str = Field(
        default="A {make} {model} was listed nearby.", min_length=1
    )
    listing_alert_category: str = Field(default="car_listing", min_length=1, max_length=50)
    push_android_sound: str | None = Field(default="notif_sound")
    push_ios_sound: str | None = Field(default="notif_sound.wav")
    listing_alerts_require_device_token: bool = Field(
        default=False,
        description="Only resolve recipients that have at least one device token",
    )

    @model_validator(mode="after")
    def _validate_firebase_credentials(self) -> "Settings":
        values = (
            self.firebase_project_id,
            self.firebase_client_email,
            self.firebase_private_key,
        )
        if any(values) and not all(values):
            raise ValueError(
                "FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL and FIREBASE_PRIVATE_KEY "
                "must all be provided to enable push delivery"
            )
        if self.firebase_client_email and "@" not in self.firebase_client_email:
            raise ValueError("FIREBASE_CLIENT_EMAIL must be a valid email address")
        if self.firebase_private_key:
            self.firebase_private_key = self.firebase_private_key.replace("\\n", "\n")
        return self

    @property
    def push_enabled(self) -> bool:
        """Return ``True`` when Firebase credentials are configured."""

        return bool(self.firebase_private_key)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
