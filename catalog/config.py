"""
Configuration for the catalog service.

``Settings`` reads environment variables once, when the module is
imported.  Defaults point at a local MongoDB instance and the ports the
services have always listened on.
"""

import os
from dataclasses import dataclass
from typing import List


@dataclass
class Settings:
    """Service settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "catalog-api")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    catalog_host: str = os.getenv("CATALOG_HOST", "0.0.0.0")
    catalog_port: int = int(os.getenv("CATALOG_PORT", "3000"))

    # "mongo" or "memory"
    store_backend: str = os.getenv("STORE_BACKEND", "mongo")
    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://127.0.0.1:27017")
    mongo_db: str = os.getenv("MONGO_DB", "ecommerce")
    mongo_collection: str = os.getenv("MONGO_COLLECTION", "products")
    mongo_timeout_ms: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
