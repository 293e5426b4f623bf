# product_api/config.py
import logging
import logging.config
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError as PydanticValidationError

# Settings are read from the environment once, at process start.


class ConfigError(Exception):
    pass


class Settings(BaseModel):
    mongodb_uri: str
    mongodb_db: str = "test"
    mongodb_collection: str = "products"
    mongodb_timeout_ms: int = 5000
    host: str = "0.0.0.0"
    port: int = 5000
    log_config: Path = Path("config/logging.yaml")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        env = os.environ if environ is None else environ
        raw = {
            "mongodb_uri": env.get("MONGODB_URI"),
            "mongodb_db": env.get("MONGODB_DB"),
            "mongodb_collection": env.get("MONGODB_COLLECTION"),
            "mongodb_timeout_ms": env.get("MONGODB_TIMEOUT_MS"),
            "host": env.get("HOST"),
            "port": env.get("PORT"),
            "log_config": env.get("LOG_CONFIG"),
            "log_level": env.get("LOG_LEVEL"),
        }
        if not raw["mongodb_uri"]:
            raise ConfigError("MONGODB_URI is not set")
        try:
            return cls(**{k: v for k, v in raw.items() if v not in (None, "")})
        except PydanticValidationError as e:
            bad = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
            raise ConfigError(f"invalid configuration: {bad}") from e

    @classmethod
    def load(cls, env_file: Path = Path(".env")) -> "Settings":
        """Read a .env file into the environment, then build settings from it.

        Variables already set in the environment win over the file.
        """
        load_dotenv(env_file, override=False)
        return cls.from_env()


def setup_logging(config_path: Path = Path("config/logging.yaml"), level: str = "INFO"):
    """Initialize logging from a YAML dictConfig file, or basicConfig when it is absent."""
    if config_path.exists():
        with open(config_path, "r") as f:
            logging.config.dictConfig(yaml.safe_load(f))
    else:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
