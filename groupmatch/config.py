"""
Configuration module for the groupmatch engine.

Loads environment variables and provides configuration singletons.
Uses pydantic for validation.
"""

from pydantic_settings import BaseSettings
from typing import Optional

from groupmatch.models import MatchingWeights


class Config(BaseSettings):
    """
    Engine configuration loaded from environment variables.

    All values come from .env file or system environment.
    Type hints provide validation (pydantic converts types automatically).
    """

    # ============================================================
    # DEFAULT MATCHING WEIGHTS
    # ============================================================
    WEIGHT_ACTIVITY: float = 5.0
    """Relative importance of having done the requested activity before."""

    WEIGHT_AGE: float = 1.4
    """Relative importance of a small age gap."""

    WEIGHT_DISTANCE: float = 1.0
    """Relative importance of living close by."""

    WEIGHT_VIBE: float = 0.0
    """Relative importance of a shared vibe. Disabled by default."""

    WEIGHT_RELIGION: float = 0.6
    """Relative importance of a shared religion."""

    WEIGHT_ETHNICITY: float = 1.0
    """Relative importance of a shared ethnicity."""

    # ============================================================
    # GROUP ASSEMBLY
    # ============================================================
    FILL_SHORTFALL: bool = True
    """Fill empty seats with random eligible pool members after ranking."""

    DEFAULT_GROUP_SIZE: int = 4
    """Group size used when a request does not specify one."""

    MAX_GROUP_SIZE: int = 12
    """Largest group size the matching graph accepts."""

    # ============================================================
    # SYNTHETIC POOL
    # ============================================================
    SAMPLE_POOL_SIZE: int = 500
    """Number of users in the generated sample pool."""

    SAMPLE_MIN_PER_ACTIVITY: int = 60
    """Minimum attendees per catalog activity in the sample pool."""

    # ============================================================
    # GRAPH / TRACING
    # ============================================================
    GRAPH_TIMEOUT: int = 30
    """Maximum seconds a graph can run before timeout. Default: 30 seconds."""

    LANGSMITH_API_KEY: Optional[str] = None
    """LangSmith API key for tracing graphs. Leave empty if not using."""

    LANGSMITH_ENABLED: bool = False
    """Enable LangSmith tracing. Set to True only if LANGSMITH_API_KEY is set."""

    # ============================================================
    # LOGGING
    # ============================================================
    DEBUG: bool = False
    """Enable debug logging. Set True for development, False for production."""

    LOG_FILE_PATH: str = "logs/groupmatch.log"
    """Rotating log file location."""

    class Config:
        """Pydantic configuration."""
        env_file = ".env"  # Read from .env file
        case_sensitive = True  # Variable names are case-sensitive
        extra = "ignore"  # Ignore extra env vars not defined above

    def default_weights(self) -> MatchingWeights:
        """Build the MatchingWeights used when a caller supplies none."""
        return MatchingWeights(
            activity=self.WEIGHT_ACTIVITY,
            age=self.WEIGHT_AGE,
            distance=self.WEIGHT_DISTANCE,
            vibe=self.WEIGHT_VIBE,
            religion=self.WEIGHT_RELIGION,
            ethnicity=self.WEIGHT_ETHNICITY,
        )


# ============================================================
# SINGLETON INSTANCE
# ============================================================
# Load config once at startup, reuse throughout app
config = Config()


# ============================================================
# VALIDATION AT STARTUP
# ============================================================
def validate_config() -> dict:
    """
    Validate that config values are consistent.

    Called by hosts at startup to fail fast if config is unusable.

    Returns:
        dict: Status of each configured area

    Raises:
        ValueError: If any value is out of range
    """
    errors = []

    weights = {
        "WEIGHT_ACTIVITY": config.WEIGHT_ACTIVITY,
        "WEIGHT_AGE": config.WEIGHT_AGE,
        "WEIGHT_DISTANCE": config.WEIGHT_DISTANCE,
        "WEIGHT_VIBE": config.WEIGHT_VIBE,
        "WEIGHT_RELIGION": config.WEIGHT_RELIGION,
        "WEIGHT_ETHNICITY": config.WEIGHT_ETHNICITY,
    }
    for name, value in weights.items():
        if value < 0:
            errors.append(f"{name} must be non-negative")

    if config.DEFAULT_GROUP_SIZE < 1:
        errors.append("DEFAULT_GROUP_SIZE must be at least 1")

    if config.MAX_GROUP_SIZE < config.DEFAULT_GROUP_SIZE:
        errors.append("MAX_GROUP_SIZE must not be smaller than DEFAULT_GROUP_SIZE")

    if config.SAMPLE_POOL_SIZE < 0:
        errors.append("SAMPLE_POOL_SIZE must be non-negative")

    # If LangSmith enabled, must have API key
    if config.LANGSMITH_ENABLED and not config.LANGSMITH_API_KEY:
        errors.append("LANGSMITH_ENABLED=True but LANGSMITH_API_KEY not set")

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join([f"  - {e}" for e in errors]))

    total = sum(weights.values())
    return {
        "weights": f"✓ sum={total:g}" if total > 0 else "✗ All zero (ties broken randomly)",
        "shortfall_fill": "✓ Enabled" if config.FILL_SHORTFALL else "✗ Disabled",
        "langsmith": "✓ Configured" if config.LANGSMITH_ENABLED else "✗ Disabled",
    }


if __name__ == "__main__":
    """Allow testing config by running: python -m groupmatch.config"""
    try:
        status = validate_config()
        print("✅ Configuration is valid!")
        print("\nConfiguration Status:")
        for key, value in status.items():
            print(f"  {key}: {value}")
    except ValueError as e:
        print(f"❌ Configuration error:\n{e}")
        exit(1)
