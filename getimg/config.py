import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# GetImg API Configuration
BASE_URL = "https://api.getimg.ai/v1"
DEFAULT_MODEL = "lcm-realistic-vision-v5-1"

# Models pinned by the stable-diffusion endpoints
CONTROLNET_MODEL = "stable-diffusion-v1-5"
REPAINT_MODEL = "stable-diffusion-v1-5-inpainting"
EDIT_MODEL = "instruct-pix2pix"

# Environment variable names
API_KEY_ENV = "GETIMG_API_KEY"
MODEL_ENV = "GETIMG_MODEL"
BASE_URL_ENV = "GETIMG_BASE_URL"
TIMEOUT_ENV = "GETIMG_TIMEOUT"
LOG_LEVEL_ENV = "GETIMG_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings, loaded once at process start"""
    api_key: str
    model: str
    base_url: str = BASE_URL
    timeout: Optional[float] = None  # seconds, None disables the deadline
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw!r}") from None


def load_settings(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    log_level: Optional[str] = None,
) -> Settings:
    """
    Resolve settings from explicit values, then the environment, then defaults.

    A .env file in the working directory is loaded first, without overriding
    variables that are already set.

    Args:
        api_key: API key given on the command line
        model: Model identifier given on the command line
        base_url: API root override
        timeout: Per-request deadline in seconds
        log_level: Logging level name

    Returns:
        Settings: Immutable settings to pass down to the client
    """
    load_dotenv()

    if api_key is None:
        api_key = os.getenv(API_KEY_ENV, "")
    if model is None:
        model = os.getenv(MODEL_ENV) or DEFAULT_MODEL
    if base_url is None:
        base_url = os.getenv(BASE_URL_ENV) or BASE_URL
    if timeout is None:
        timeout = _parse_timeout(os.getenv(TIMEOUT_ENV))
    if log_level is None:
        log_level = os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL

    return Settings(
        api_key=api_key,
        model=model,
        base_url=base_url,
        timeout=timeout,
        log_level=log_level.upper(),
    )
