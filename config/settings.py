import os
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from services.assessment_engine.engine import DEFAULT_QUESTION_BANK_PATH, DEFAULT_SUGGESTIONS_PATH

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()


class AppSettings(BaseSettings):
    database_url: str = "sqlite:///./assessment.db"
    sql_echo: bool = False
    question_bank_path: str = str(DEFAULT_QUESTION_BANK_PATH)
    suggestions_path: str = str(DEFAULT_SUGGESTIONS_PATH)
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]
    api_base_url: str = "http://localhost:3000"  # used by the assessment client

    model_config = SettingsConfigDict(env_prefix='ASSESSMENT_')


# Instantiate settings
settings = AppSettings()
