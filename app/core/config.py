"""
Configuration management using Pydantic settings.
"""
from typing import List, Union
import os
from pydantic import AnyHttpUrl, validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()



class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Exam Performance Analysis"
    DEBUG: bool = True
    ENV: str = os.getenv("ENV", "development")

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./exam_analysis.db")

    # JWT Configuration
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # LLMs Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")

    # LangSmith Tracing Configuration
    LANGSMITH_TRACING: bool = os.getenv("LANGSMITH_TRACING", "false").lower() == "true"
    LANGSMITH_ENDPOINT: str = os.getenv("LANGSMITH_ENDPOINT", "")
    LANGSMITH_API_KEY: str = os.getenv("LANGSMITH_API_KEY", "")
    LANGSMITH_PROJECT: str = os.getenv("LANGSMITH_PROJECT", "")

    # Analysis engine
    SEMANTIC_CLASSIFIER_ENABLED: bool = os.getenv("SEMANTIC_CLASSIFIER_ENABLED", "false").lower() == "true"
    SEMANTIC_CLASSIFIER_MODEL: str = os.getenv("SEMANTIC_CLASSIFIER_MODEL", "gpt-4o-mini")
    SEMANTIC_CLASSIFIER_TIMEOUT: float = float(os.getenv("SEMANTIC_CLASSIFIER_TIMEOUT", 15))  # seconds
    SEMANTIC_CLASSIFIER_MAX_PROMPT_CHARS: int = int(os.getenv("SEMANTIC_CLASSIFIER_MAX_PROMPT_CHARS", 12000))
    ADVICE_ENRICHMENT_ENABLED: bool = os.getenv("ADVICE_ENRICHMENT_ENABLED", "false").lower() == "true"
    IDEAL_TIME_PER_QUESTION: float = float(os.getenv("IDEAL_TIME_PER_QUESTION", 90))  # seconds

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Union[List[AnyHttpUrl], str] = "*"

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        if v == "*" or v == ["*"]:
            return "*"
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
