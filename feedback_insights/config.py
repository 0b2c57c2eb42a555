"""Configuration settings for Feedback Insights."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Model configuration
MODEL_CONFIG: dict[str, str | float | int] = {
    "classification_model": "gpt-4o-mini",
    "temperature": 0.1,
    "max_tokens": 300,
    "request_timeout": 20,
}

# Key-value schema, one key per aggregate field
COUNT_PREFIX = "category:"
SUMMARY_PREFIX = "category_summary:"
EXAMPLES_PREFIX = "category_examples:"
EXAMPLES_SEEN_PREFIX = "category_examples_seen:"

# Aggregate limits
MAX_EXAMPLES = 3
LIST_LIMIT = 1000

# Fallback classification
DEFAULT_SENTIMENT = "unknown"
DEFAULT_CATEGORY = "unknown"
DEFAULT_SUMMARY = "N/A"

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = "INFO"

SERVICE_NAME = "Feedback Insights"

# Project paths
PACKAGE_DIR = Path(__file__).parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"


class ConsistencyMode(str, Enum):
    """How read-modify-write cycles on a single key are coordinated."""

    BEST_EFFORT = "best_effort"
    SERIALIZED = "serialized"

    @classmethod
    def from_string(cls, value: str | None) -> "ConsistencyMode":
        """Parse a mode name, defaulting to best effort."""
        if not value:
            return cls.BEST_EFFORT
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.BEST_EFFORT


class SamplingMode(str, Enum):
    """Replacement policy for the per-category example set."""

    BOUNDED_RANDOM = "bounded_random"
    RESERVOIR = "reservoir"

    @classmethod
    def from_string(cls, value: str | None) -> "SamplingMode":
        """Parse a mode name, defaulting to bounded random replacement."""
        if not value:
            return cls.BOUNDED_RANDOM
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.BOUNDED_RANDOM


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Runtime settings resolved from the environment."""

    db_path: Path = Path("feedback.db")
    kv_path: Path | None = None  # None keeps aggregates in memory
    consistency_mode: ConsistencyMode = ConsistencyMode.BEST_EFFORT
    sampling_mode: SamplingMode = SamplingMode.BOUNDED_RANDOM
    use_mock_classifier: bool = False
    host: str = "127.0.0.1"
    port: int = 8787

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call load_dotenv first)."""
        kv_path = os.getenv("FEEDBACK_KV_PATH", "").strip()
        return cls(
            db_path=Path(os.getenv("FEEDBACK_DB_PATH", "feedback.db")),
            kv_path=Path(kv_path) if kv_path else None,
            consistency_mode=ConsistencyMode.from_string(os.getenv("CONSISTENCY_MODE")),
            sampling_mode=SamplingMode.from_string(os.getenv("SAMPLING_MODE")),
            use_mock_classifier=_env_flag("USE_MOCK_CLASSIFIER")
            or not os.getenv("OPENAI_API_KEY"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8787")),
        )
