"""
Environment-driven defaults for the calculators.
"""
import os
import logging
from typing import Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


def int_from_env(name: str, default: int) -> int:
    """Read an integer variable, falling back to the default if it is not a number."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={value!r}, using {default}")
        return default


DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

TAX_DATA_DIR: str = os.getenv("FINCALC_TAX_DATA_DIR", DEFAULT_DATA_DIR)
DEFAULT_TAX_YEAR: int = int_from_env("FINCALC_TAX_YEAR", 2024)
LOG_LEVEL: str = os.getenv("FINCALC_LOG_LEVEL", "WARNING")


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for host applications that have none."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
