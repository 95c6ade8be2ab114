from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class MissingCredentialError(RuntimeError):
    """Raised when a required credential is absent from the environment."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} environment variable is required.")


def _strip_inline_comment(value: str) -> str:
    """Strip trailing inline comments that python-dotenv keeps for unquoted values."""
    idx = value.find(" #")
    if idx != -1:
        value = value[:idx]
    return value.strip()


class Settings(BaseSettings):
    # Flight data (Skyscanner via RapidAPI)
    rapid_api_key: str = ""
    rapid_api_host: str = "skyscanner89.p.rapidapi.com"
    use_real_apis: bool = True
    skyscanner_site: str = "https://www.skyscanner.hu"
    currency: str = "EUR"
    http_timeout_seconds: Optional[float] = None

    # Result memo
    cache_dir: str = "."
    cache_key: str = "results"
    trip_file: str = "trip.json"

    # Google Sheets output
    google_client_email: str = ""
    google_private_key: str = ""
    google_spreadsheet_id: str = ""
    sheet_name: str = "Repjegyek"

    log_level: str = "INFO"

    @field_validator("rapid_api_key", "google_client_email", "google_spreadsheet_id", mode="before")
    @classmethod
    def clean_secret(cls, v: str) -> str:
        if isinstance(v, str):
            return _strip_inline_comment(v)
        return v

    @field_validator("google_private_key", mode="before")
    @classmethod
    def expand_key_newlines(cls, v: str) -> str:
        # PEM keys pasted into .env usually carry escaped newlines
        if isinstance(v, str):
            return v.replace("\\n", "\n")
        return v

    def require(self, field: str) -> str:
        """Return a non-empty setting or raise MissingCredentialError naming its env var."""
        value = getattr(self, field)
        if not value:
            raise MissingCredentialError(field.upper())
        return value

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
