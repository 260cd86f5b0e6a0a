"""Centralized logging configuration for the mail relay.

Provides a logger factory with file rotation, multiple handlers,
and consistent formatting across all relay components.

Features:
    - Dual output: Console (stdout) + File handlers
    - Automatic log file rotation (size and backups from settings)
    - Configurable log levels per module
    - Structured context strings for gate and dispatch decisions
    - Startup banner with configuration summary (secrets masked)

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mail_relay.config.settings import RelayConfig

# Global configuration
_LOG_DIR = Path.cwd() / "logs"
_LOG_FORMAT_DETAILED = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
_LOG_FORMAT_SIMPLE = "%(asctime)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level logger configuration
_MODULE_LEVELS = {
    "mail_relay.gate": logging.DEBUG,
    "mail_relay.relay": logging.DEBUG,
    "mail_relay.clients": logging.DEBUG,
    "mail_relay.api": logging.INFO,
    "mail_relay.config": logging.INFO,
    "httpx": logging.WARNING,
}

# Flag file to track if banner was already printed (for multi-worker scenarios)
_BANNER_FLAG_FILE = os.path.join(tempfile.gettempdir(), ".mail_relay_banner_printed")

# Module-level flag to track if this process printed the banner
_banner_printed_by_this_process = False

# ============================================================================
# ANSI Color Codes
# ============================================================================
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "white": "\033[97m",
    "red": "\033[31m",
    "b_blue": "\033[94m",
    "b_cyan": "\033[96m",
    "b_green": "\033[92m",
    "b_yellow": "\033[93m",
    "b_magenta": "\033[95m",
}

_B = COLORS["bold"]
_R = COLORS["reset"]
_BC = COLORS["b_cyan"]
_BG = COLORS["b_green"]
_BY = COLORS["b_yellow"]
_BM = COLORS["b_magenta"]
_BB = COLORS["b_blue"]

# fmt: off
BANNER = f"""
{_B}{_BC} ██████╗ {_BG}███████╗{_BY}██╗     {_BM} █████╗ {_BB}██╗   ██╗{_R}
{_BC} ██╔══██╗{_BG}██╔════╝{_BY}██║     {_BM}██╔══██╗{_BB}╚██╗ ██╔╝{_R}
{_BC} ██████╔╝{_BG}█████╗  {_BY}██║     {_BM}███████║{_BB} ╚████╔╝ {_R}
{_BC} ██╔══██╗{_BG}██╔══╝  {_BY}██║     {_BM}██╔══██║{_BB}  ╚██╔╝  {_R}
{_BC} ██║  ██║{_BG}███████╗{_BY}███████╗{_BM}██║  ██║{_BB}   ██║   {_R}
{_BC} ╚═╝  ╚═╝{_BG}╚══════╝{_BY}╚══════╝{_BM}╚═╝  ╚═╝{_BB}   ╚═╝   {_R}
{_R}"""  # noqa: E501
# fmt: on


def _try_acquire_banner_lock() -> bool:
    """Try to acquire banner lock atomically using exclusive file creation.

    Returns:
        True if this process should print the banner, False otherwise.
    """
    try:
        # O_CREAT | O_EXCL ensures atomic creation - fails if file exists
        fd = os.open(_BANNER_FLAG_FILE, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        os.write(fd, str(os.getpid()).encode())
        os.close(fd)
        return True
    except OSError:
        return False


def mask_secret(secret: str) -> str:
    """Mask a secret for display, showing only first and last char.

    Args:
        secret: Secret to mask.

    Returns:
        Masked secret string.
    """
    if not secret:
        return "(not set)"
    if len(secret) <= 2:
        return "***"
    return f"{secret[0]}{'*' * (len(secret) - 2)}{secret[-1]}"


def print_banner() -> None:
    """Print the service startup banner."""
    global _banner_printed_by_this_process  # noqa: PLW0603
    if not _try_acquire_banner_lock():
        return

    _banner_printed_by_this_process = True
    print(BANNER)
    print(f"{COLORS['dim']}{'─' * 72}{COLORS['reset']}")
    print(
        f"{COLORS['cyan']}{COLORS['bold']}  "
        f"Transactional Email Relay{COLORS['reset']}"
    )
    print(f"{COLORS['dim']}{'─' * 72}{COLORS['reset']}\n")


def print_config_summary(settings: "RelayConfig") -> None:
    """Print a formatted configuration summary organized by categories.

    Args:
        settings: RelayConfig instance with loaded configuration.
    """
    if not _banner_printed_by_this_process:
        return

    c = COLORS

    def _line(label: str, value: str, color: str = "cyan") -> None:
        print(f"  {c['dim']}│{c['reset']} {label:<26} {c[color]}{value}{c['reset']}")

    def _header(icon: str, title: str, color: str) -> None:
        print(f"\n  {c[color]}{icon} {title}{c['reset']}")
        print(f"  {c['dim']}├{'─' * 50}{c['reset']}")

    # =========================================================================
    # Service Configuration
    # =========================================================================
    _header("▶", "Service Configuration", "green")
    _line("Service Name", settings.SERVICE_NAME)
    _line("Version", settings.SERVICE_VERSION)
    _line("Environment", settings.ENVIRONMENT, "yellow" if settings.is_development else "cyan")
    _line("Host", settings.API_HOST)
    _line("Port", str(settings.PORT))

    # =========================================================================
    # Provider Configuration
    # =========================================================================
    _header("▶", "Provider Configuration", "magenta")
    provider_key = settings.provider_api_key()
    _line("Provider", settings.EMAIL_PROVIDER)
    _line("API Key", mask_secret(provider_key), "yellow" if not provider_key else "cyan")
    _line("Default Sender", f"{settings.DEFAULT_FROM_NAME} <{settings.DEFAULT_FROM_EMAIL}>")

    # =========================================================================
    # Gate Configuration
    # =========================================================================
    _header("▶", "Request Gate", "blue")
    _line("Shared Secret", mask_secret(settings.API_SECRET_KEY))
    for index, origin in enumerate(settings.allowed_origin_set()):
        _line("Allowed Origins" if index == 0 else "", origin)

    # =========================================================================
    # Logging Configuration
    # =========================================================================
    _header("▶", "Logging Configuration", "yellow")
    _line("Level", settings.LOG_LEVEL, "green")
    _line("Log to File", str(settings.LOG_TO_FILE).lower())
    _line("Directory", settings.LOG_DIR)
    _line("Max File Size", f"{settings.LOG_MAX_SIZE_MB} MB")
    _line("Backup Count", str(settings.LOG_BACKUP_COUNT))

    print(f"\n{c['dim']}{'─' * 72}{c['reset']}")
    print(
        f"  {c['green']}{c['bold']}✓ Relay ready{c['reset']} "
        f"{c['dim']}│{c['reset']} "
        f"Docs: {c['cyan']}http://localhost:{settings.PORT}/docs{c['reset']}"
    )
    print(f"{c['dim']}{'─' * 72}{c['reset']}\n")


def setup_logging(
    log_dir: Path | str | None = None,
    log_level: str = "INFO",
    file_level: str = "DEBUG",
    console_level: str | None = None,
    enable_file: bool = True,
    max_size_mb: int = 10,
    backup_count: int = 5,
    settings: Optional["RelayConfig"] = None,
) -> None:
    """Configure root logger with file and console handlers.

    Should be called once at application startup (in the API lifespan).

    Args:
        log_dir: Directory for log files. Defaults to ./logs.
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_level: File handler level (usually DEBUG for comprehensive logging).
        console_level: Console handler level. Defaults to log_level.
        enable_file: Whether to write logs to files.
        max_size_mb: Size at which the main log file rotates.
        backup_count: Number of rotated main log files to keep.
        settings: Optional RelayConfig for printing configuration summary.

    Example:
        setup_logging(
            log_level="INFO",
            console_level="WARNING",
            settings=config,
        )
    """
    global _LOG_DIR

    _LOG_DIR = Path(log_dir) if log_dir else Path.cwd() / "logs"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, handlers filter

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(
        getattr(logging, (console_level or log_level).upper(), logging.INFO)
    )
    console_handler.setFormatter(
        logging.Formatter(_LOG_FORMAT_SIMPLE, datefmt=_DATE_FORMAT)
    )
    root_logger.addHandler(console_handler)

    if enable_file:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "mail_relay.log",
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
        file_handler.setFormatter(
            logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

        # Errors also go to their own file
        error_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "mail_relay.error.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT)
        )
        root_logger.addHandler(error_handler)

    for module_name, level in _MODULE_LEVELS.items():
        logging.getLogger(module_name).setLevel(level)

    print_banner()
    if settings:
        print_config_summary(settings)


def get_logger(name: str, log_level: str | None = None) -> logging.Logger:
    """Get a configured logger instance for a module.

    Call setup_logging() once at startup for full configuration.

    Args:
        name: Logger name (typically __name__ of calling module).
        log_level: Optional override for logger level (DEBUG, INFO, WARNING, ERROR).

    Returns:
        Configured logger instance ready for use.

    Example:
        from mail_relay.core.logger import get_logger

        logger = get_logger(__name__)
        logger.info("Origin allowed")
    """
    logger = logging.getLogger(name)

    if log_level:
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


def get_logs_directory() -> Path:
    """Get the logs directory path.

    Returns:
        Path object pointing to the configured logs directory.
    """
    return _LOG_DIR


def log_context(
    operation: str,
    origin: str | None = None,
    recipient: str | None = None,
    **kwargs,
) -> str:
    """Format a log context string with metadata.

    Args:
        operation: Operation name (e.g., "origin_check", "dispatch").
        origin: Request origin if applicable.
        recipient: Recipient summary if applicable.
        **kwargs: Additional context key-value pairs.

    Returns:
        Formatted context string for logging.

    Example:
        msg = log_context("dispatch", recipient="user@example.com", provider="Brevo")
        logger.info(f"Starting: {msg}")
        # Output: Starting: dispatch | →user@example.com (provider=Brevo)
    """
    context_parts = [operation]

    if origin:
        context_parts.insert(0, f"[{origin}]")

    if recipient:
        context_parts.append(f"→{recipient}")

    context = " | ".join(context_parts)

    if kwargs:
        extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        context = f"{context} ({extra})"

    return context
