"""
- HTTP call with clear fallback
Get the computer's secret from random.org. If anything goes wrong (no internet,
timeout, bad response), we fall back to a local secure random generator so the
game still works.

Duplicates allowed  -> /integers/  N independent digits 0..9
Distinct digits     -> /sequences/ a shuffled 0..9, we keep the first N
"""

import logging
import secrets

import requests

from . import config
from .engine import check_configuration, is_legal, random_legal
from .types import DigitString

logger = logging.getLogger(__name__)

INTEGERS_URL = "https://www.random.org/integers/"
SEQUENCES_URL = "https://www.random.org/sequences/"

# keep network quick; if it takes too long, we will just fallback
TIMEOUT_SECONDS = 3.0


def _request_digits(digits: int, allow_duplicates: bool) -> str:
    if allow_duplicates:
        url = INTEGERS_URL
        params = {
            "num": digits,     # how many numbers we want
            "min": 0,          # smallest allowed digit
            "max": 9,          # largest allowed digit
            "col": 1,          # one number per line
            "base": 10,
            "format": "plain",
            "rnd": "new",
        }
    else:
        url = SEQUENCES_URL
        params = {
            "min": 0,
            "max": 9,
            "col": 1,
            "format": "plain",
            "rnd": "new",
        }

    response = requests.get(url, params=params, timeout=TIMEOUT_SECONDS)
    # If the response was not 200 OK, this will raise an error
    response.raise_for_status()

    # The body looks like:
    #   0\n3\n1\n2\n
    values = [line.strip() for line in response.text.splitlines() if line.strip() != ""]
    if allow_duplicates and len(values) != digits:
        raise ValueError(f"random.org returned {len(values)} values, expected {digits}.")
    if len(values) < digits:
        raise ValueError(f"random.org returned {len(values)} values, expected at least {digits}.")
    return "".join(values[:digits])


def fetch_secret(digits: int, allow_duplicates: bool = True) -> DigitString:
    check_configuration(digits, allow_duplicates)

    if config.USE_RANDOM_ORG:
        try:
            secret = _request_digits(digits, allow_duplicates)
            if not is_legal(secret, digits, allow_duplicates):
                raise ValueError(f"random.org secret {secret!r} is not a legal {digits}-digit secret.")
            return secret
        except (requests.RequestException, ValueError) as exc:
            logger.warning("random.org unavailable, using local randomness: %s", exc)

    # Fallback: Python's secure random, same distribution
    return random_legal(digits, allow_duplicates, secrets.SystemRandom())
