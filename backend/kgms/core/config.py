# backend/kgms/core/config.py
import os
from pathlib import Path
from pydantic import BaseModel
from dotenv import load_dotenv

ROOT_ENV = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=ROOT_ENV, override=False)


class Settings(BaseModel):
    APP_NAME: str = "Knowledge Graph Management API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = int(os.getenv("PORT", "3000"))
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:8000")

    NEO4J_URI: str = os.getenv("NEO4J_URI", "")
    NEO4J_USER: str = os.getenv("NEO4J_USER", "neo4j")
    NEO4J_PASSWORD: str = os.getenv("NEO4J_PASSWORD", "")
    NEO4J_DATABASE: str = os.getenv("NEO4J_DATABASE", "")

    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "100"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "10000"))

    # browser-side client
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:3000/api")
    CLIENT_TIMEOUT_SECONDS: float = float(os.getenv("CLIENT_TIMEOUT_SECONDS", "30"))
    DETAIL_CACHE_TTL_SECONDS: float = float(os.getenv("DETAIL_CACHE_TTL_SECONDS", "60"))

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()
