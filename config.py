import os
from dataclasses import dataclass
from typing import Optional

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@dataclass
class Settings:
    database_url: Optional[str] = None
    database_name: Optional[str] = None
    latency_scale: float = 1.0
    payment_delay_ms: int = 2000
    api_key: Optional[str] = None
    ai_model: str = "gemini-2.5-flash"
    ai_base_url: str = GEMINI_OPENAI_BASE_URL
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL"),
            database_name=os.getenv("DATABASE_NAME"),
            latency_scale=float(os.getenv("LATENCY_SCALE", "1.0")),
            payment_delay_ms=int(os.getenv("PAYMENT_DELAY_MS", "2000")),
            api_key=os.getenv("API_KEY"),
            ai_model=os.getenv("AI_MODEL", "gemini-2.5-flash"),
            ai_base_url=os.getenv("AI_BASE_URL", GEMINI_OPENAI_BASE_URL),
            port=int(os.getenv("PORT", 8000)),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def use_mongo(self) -> bool:
        return bool(self.database_url and self.database_name)
