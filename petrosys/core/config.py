import os
from typing import List, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()



class Settings(BaseSettings):
    # CORE SETTINGS
    ENV: str = os.getenv("ENV", "development")
    DEBUG: bool = ENV == "development"
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Petroleum System Analysis API"

    # CORS SETTINGS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @field_validator("BACKEND_CORS_ORIGINS")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # REASONING SERVICE SETTINGS
    REASONING_BASE_URL: str = os.getenv("REASONING_BASE_URL", "https://api.openai.com/v1")
    REASONING_API_KEY: str = os.getenv("REASONING_API_KEY", "")
    REASONING_MODEL: str = os.getenv("REASONING_MODEL", "gpt-4o-mini")
    REASONING_TIMEOUT: float = float(os.getenv("REASONING_TIMEOUT", "60"))
    REASONING_MAX_RETRIES: int = int(os.getenv("REASONING_MAX_RETRIES", "2"))
    REASONING_TEMPERATURE: float = float(os.getenv("REASONING_TEMPERATURE", "0.2"))

    # CHANCE POLICY SETTINGS
    # "weighted" averages geological and commercial chance, "product" multiplies them
    CHANCE_COMBINATION: str = os.getenv("CHANCE_COMBINATION", "weighted")
    CHANCE_GEOLOGICAL_WEIGHT: float = float(os.getenv("CHANCE_GEOLOGICAL_WEIGHT", "0.5"))
    CHANCE_COMMERCIAL_WEIGHT: float = float(os.getenv("CHANCE_COMMERCIAL_WEIGHT", "0.5"))
    CHANCE_MISSING_RISK: float = float(os.getenv("CHANCE_MISSING_RISK", "50"))

    @field_validator("CHANCE_COMBINATION")
    def check_combination(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("weighted", "product"):
            raise ValueError(f"Unsupported chance combination: {v}")
        return v

    # PIPELINE SETTINGS
    PIPELINE_MAX_WORKERS: int = int(os.getenv("PIPELINE_MAX_WORKERS", "4"))

    # LOGGING SETTINGS
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
