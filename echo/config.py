"""Settings for the echo demo, read from the environment at import."""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    host: str = os.getenv("ECHO_HOST", "0.0.0.0")
    # The catalog owns 3000; the echo demo used to share it.
    port: int = int(os.getenv("ECHO_PORT", "3001"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
