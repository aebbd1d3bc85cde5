"""Configuration for the Browser Use Live server"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

import structlog
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables
load_dotenv()

# Server identity
SERVER_NAME = "browser-use-live"
SERVER_TITLE = "Browser Use Live"
SERVER_DESCRIPTION = (
    "Run browser tasks via Browser Use Cloud and watch them live in the assistant"
)

# Browser Use Cloud API
API_KEY_ENV_VAR = "BROWSER_USE_API_KEY"

# Task defaults
SUPPORTED_MODELS = (
    "browser-use-2.0",
    "gpt-4.1",
    "gpt-4.1-mini",
    "o4-mini",
    "gemini-2.5-flash",
    "claude-sonnet-4-6",
)
DEFAULT_MODEL = "browser-use-2.0"
DEFAULT_MAX_STEPS = 20
MIN_MAX_STEPS = 1
MAX_MAX_STEPS = 100

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _parse(name: str, value: str, kind):
    try:
        return kind(value)
    except ValueError:
        raise ConfigurationError(name, value) from None


def _env_float(name: str, default: str) -> float:
    return _parse(name, os.getenv(name, default), float)


def _env_int(name: str, default: str) -> int:
    return _parse(name, os.getenv(name, default), int)


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return _parse(name, value, float) if value else None


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return _parse(name, value, int) if value else None


@dataclass
class BrowserLiveConfig:
    """Runtime configuration for the server and task coordinator.

    Use from_env() to pick up environment overrides at call time rather
    than import time.
    """

    api_key: str = ""
    api_url: str = "https://api.browser-use.com/mcp"
    api_timeout: float = 30.0
    public_url: str = "http://localhost:3000"

    # Polling
    poll_interval: float = 4.0
    max_wait_seconds: Optional[float] = None  # None = wait until resolved
    max_polls: Optional[int] = None

    # Serving
    host: str = "0.0.0.0"
    port: int = 3000

    # Telemetry
    otlp_endpoint: Optional[str] = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "BrowserLiveConfig":
        """Load config with environment variable overrides.

        Environment variables:
            BROWSER_USE_API_KEY: Browser Use Cloud credential (required to start tasks)
            BROWSER_USE_API_URL: Override api_url
            API_TIMEOUT: HTTP timeout in seconds (default: 30)
            MCP_URL: Public base URL of this server (default: http://localhost:3000)
            TASK_POLL_INTERVAL: Seconds between status polls (default: 4)
            TASK_MAX_WAIT_SECONDS: Optional wall-clock bound for run-to-completion
            TASK_MAX_POLLS: Optional poll-count bound for run-to-completion
            HOST / PORT: Bind address for the HTTP transport
            OTLP_ENDPOINT: Optional OTLP gRPC endpoint for traces

        Raises:
            ConfigurationError: If a numeric setting cannot be parsed
        """
        return cls(
            api_key=os.getenv(API_KEY_ENV_VAR, ""),
            api_url=os.getenv("BROWSER_USE_API_URL", "https://api.browser-use.com/mcp"),
            api_timeout=_env_float("API_TIMEOUT", "30"),
            public_url=os.getenv("MCP_URL", "http://localhost:3000").rstrip("/"),
            poll_interval=_env_float("TASK_POLL_INTERVAL", "4"),
            max_wait_seconds=_optional_float("TASK_MAX_WAIT_SECONDS"),
            max_polls=_optional_int("TASK_MAX_POLLS"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", "3000"),
            otlp_endpoint=os.getenv("OTLP_ENDPOINT") or None,
        )


def setup_logging(log_file: Optional[str] = None):
    """Configure logging - JSON to stderr (stdout is reserved for MCP stdio)"""
    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    log_file = log_file or os.getenv("LOG_FILE")

    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(stderr_handler)

    # Optional human-readable file log for debugging
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
