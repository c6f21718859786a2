"""
Environment configuration for the booking payments backend.
Values come from the process environment (or a local .env file).
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    xendit_secret_key: str = ""
    xendit_api_url: str = "https://api.xendit.co/v2"
    # x-callback-token expected on webhooks; unset skips the check (local dev only)
    xendit_callback_token: Optional[str] = None
    xendit_timeout: float = 10.0

    database_url: str = "sqlite:///./booking.db"
    frontend_url: str = "http://localhost:5173"

    invoice_currency: str = "PHP"
    invoice_duration: int = 86400  # 24 hours

    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 4242
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            xendit_secret_key=os.getenv("XENDIT_SECRET_KEY", ""),
            xendit_api_url=os.getenv("XENDIT_API_URL", "https://api.xendit.co/v2"),
            xendit_callback_token=os.getenv("XENDIT_CALLBACK_TOKEN") or None,
            xendit_timeout=float(os.getenv("XENDIT_TIMEOUT", "10.0")),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./booking.db"),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/"),
            invoice_currency=os.getenv("INVOICE_CURRENCY", "PHP"),
            invoice_duration=int(os.getenv("INVOICE_DURATION", "86400")),
            cors_origins=_origins(os.getenv("CORS_ORIGINS", "*")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "4242")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
