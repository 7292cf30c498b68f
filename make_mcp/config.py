from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    webhook_url: str = ""
    log_level: str = "INFO"
    log_format: str = "text"

    @property
    def webhook_configured(self) -> bool:
        return bool(self.webhook_url)

    @classmethod
    def from_env(cls) -> "AppConfig":
        webhook_url = os.getenv("MAKE_WEBHOOK_URL", "").strip()
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_format = os.getenv("LOG_FORMAT", "text").lower()

        return cls(
            webhook_url=webhook_url,
            log_level=log_level,
            log_format=log_format,
        )
