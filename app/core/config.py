from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pydantic import field_validator


class MailSettings(BaseSettings):
    """SMTP transport settings used by the notifier."""
    SMTP_HOST: str = ''
    SMTP_PORT: int = 587
    SMTP_USER: str = ''
    SMTP_PASSWORD: str = ''
    SMTP_SECURE: bool = False  # True = SSL implícito (465), False = STARTTLS
    SMTP_TIMEOUT: int = 30
    MAIL_FROM: str = ''
    MAIL_FROM_NAME: str = 'Invoicing'

    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASSWORD)

    @property
    def sender(self) -> str:
        address = self.MAIL_FROM or self.SMTP_USER
        return f"{self.MAIL_FROM_NAME} <{address}>"

    @field_validator("SMTP_SECURE", mode="before")
    @classmethod
    def parse_secure(cls, v):
        if isinstance(v, str):
            return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
        return bool(v)


class Settings(BaseSettings):
    # Database settings
    POSTGRES_USER: str = 'invoicing_user'
    POSTGRES_PASSWORD: str = 'invoicing_pass'
    POSTGRES_DB: str = 'invoicing_db'
    POSTGRES_HOST: str = 'postgres'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Sobrescribe la URL de Postgres (ej: sqlite:///./dev.db)

    # JWT settings
    APP_SECRET_STRING: str = 'your-super-secret-key-here-change-in-production-2024'
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        if isinstance(v, str):
            return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
        return bool(v)


settings = Settings()


def get_settings() -> Settings:
    """Dependency: configuración de la aplicación."""
    return settings


@lru_cache
def get_mail_settings() -> MailSettings:
    """Dependency: configuración del transporte SMTP, leída una vez por proceso."""
    return MailSettings()
