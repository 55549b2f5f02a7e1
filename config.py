import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Uygulama Ayarları
    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Library Manager"))
    app_version: str = field(default_factory=lambda: os.getenv("APP_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "False"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # API Ayarları
    api_host: str = field(default_factory=lambda: os.getenv("API_HOST", "127.0.0.1"))
    api_port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))

    # Katalog ve ödünç politikaları
    allow_duplicate_identifiers: bool = field(default_factory=lambda: _env_flag("LIBRARY_ALLOW_DUPLICATE_IDS", "False"))
    exclusive_loans: bool = field(default_factory=lambda: _env_flag("LIBRARY_EXCLUSIVE_LOANS", "False"))
    isolate_observer_failures: bool = field(default_factory=lambda: _env_flag("LIBRARY_ISOLATE_OBSERVERS", "True"))

    # E-posta Ayarları
    smtp_from_email: str = field(default_factory=lambda: os.getenv("SMTP_FROM_EMAIL", "noreply@library.com"))
    notification_outbox_size: int = field(default_factory=lambda: int(os.getenv("NOTIFICATION_OUTBOX_SIZE", "1000")))

    @classmethod
    def from_env(cls) -> "Settings":
        """Re-read the environment (tests patch env vars after import)."""
        return cls()


settings = Settings()
