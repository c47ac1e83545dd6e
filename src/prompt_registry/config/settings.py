"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
BcryptRounds = Annotated[int, Field(ge=10, le=31)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    jwt_secret: NonEmptyStr = Field(validation_alias="JWT_SECRET")
    jwt_expires_in_days: PositiveInt = Field(default=30, validation_alias="JWT_EXPIRES_IN_DAYS")
    min_password_length: PositiveInt = Field(default=6, validation_alias="MIN_PASSWORD_LENGTH")
    bcrypt_salt_rounds: BcryptRounds = Field(default=10, validation_alias="BCRYPT_SALT_ROUNDS")
    app_env: Literal["development", "production", "test"] = Field(
        default="production",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def expose_error_stack(self) -> bool:
        """Return whether error responses may include stack traces."""

        return self.app_env == "development"


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
