# idea_validator/core/config.py
import logging
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__) # Standard practice to get logger by module name

class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables and .env file.
    """
    PROJECT_NAME: str = "Product Idea Validator"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development" # e.g., development, staging, production

    # --- Google Gemini Configuration ---
    GEMINI_API_KEY: str # Required. Startup will fail if not set.
    GEMINI_MODEL_NAME: str = "gemini-1.5-flash-latest"
    GEMINI_TEMPERATURE: float = 0.4
    GEMINI_MAX_OUTPUT_TOKENS: int = 8192 # The full report is long; keep headroom
    GEMINI_TIMEOUT_SECONDS: float = 120.0

    # --- Persistence ---
    DATABASE_URL: str = "sqlite:///./idea_validator.db"

    # --- HTTP ---
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


try:
    settings = Settings()
    logger.info(f"Application settings loaded successfully for '{settings.PROJECT_NAME}'. Environment: {settings.ENVIRONMENT}")
    logger.info(f"Using model '{settings.GEMINI_MODEL_NAME}' and database '{settings.DATABASE_URL.split('://', 1)[0]}'.")
except Exception as e: # Catch potential Pydantic validation errors during instantiation
    logger.critical(f"CRITICAL ERROR: Could not load application settings. Error: {e}", exc_info=True)
    # Halt application startup if config is invalid.
    raise ValueError(f"Fatal error initializing application settings: {e}") from e
