"""
Runtime knobs read from the environment (or a local .env).

- APP_ENV                      -> "local" creates tables at startup, "test" skips it
- USE_RANDOM_ORG               -> "0" keeps secret generation fully offline
- MAX_MATERIALIZED_CANDIDATES  -> largest candidate list the solver keeps in memory
- MAX_GUESSES                  -> guesses per side before a match is a draw
- LOG_LEVEL                    -> standard logging level name

DATABASE_URL is read by db.py, next to the engine it configures.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.")


APP_ENV = os.getenv("APP_ENV", "local")
USE_RANDOM_ORG = os.getenv("USE_RANDOM_ORG", "1") not in ("0", "false", "no")
MAX_MATERIALIZED_CANDIDATES = _env_int("MAX_MATERIALIZED_CANDIDATES", 1_000_000)
MAX_GUESSES = _env_int("MAX_GUESSES", 10)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
