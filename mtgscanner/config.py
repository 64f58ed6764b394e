from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# SCAN PIPELINE DEFAULTS
# =============================================================================

# Maximum number of card records kept in the lookup cache
DEFAULT_CACHE_CAPACITY = 500

# Same text is ignored if it was accepted less than this many seconds ago
DEFAULT_INTAKE_COOLDOWN = 3.0

# Minimum spacing between OCR passes on the camera side
DEFAULT_RECOGNITION_COOLDOWN = 1.5

# Total deadline for a single remote card lookup, in seconds
DEFAULT_LOOKUP_TIMEOUT = 10.0


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "MTG Scanner"
    debug: bool = False

    scryfall_base_url: str = "https://api.scryfall.com"
    user_agent: str = "MTGScanner/1.0"
    lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT

    cache_capacity: int = DEFAULT_CACHE_CAPACITY
    intake_cooldown: float = DEFAULT_INTAKE_COOLDOWN
    recognition_cooldown: float = DEFAULT_RECOGNITION_COOLDOWN

    # Directory for CSV exports. None means the system temp directory.
    export_dir: str | None = None


settings = Settings()
