"""Centralized logging configuration for contact service.

Provides the logger factory plus one-time root logger setup with console and
rotating file handlers.

Features:
    - Dual output: console (stdout) + file handlers
    - Size-based log file rotation with a separate error log
    - Module-specific levels for the noisier packages
    - Startup configuration summary with credentials masked
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from contact_service.config.settings import ContactConfig

_LOG_FORMAT_DETAILED = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
_LOG_FORMAT_SIMPLE = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_MODULE_LEVELS = {
    "contact_service.clients": logging.DEBUG,
    "contact_service.delivery": logging.DEBUG,
    "contact_service.config": logging.INFO,
}

logger = logging.getLogger(__name__)


def _mask_password(password: str) -> str:
    """Mask password for display, showing only first and last char.

    Args:
        password: Password to mask.

    Returns:
        Masked password string.
    """
    if not password:
        return "(not set)"
    if len(password) <= 2:
        return "***"
    return f"{password[0]}{'*' * (len(password) - 2)}{password[-1]}"


def log_config_summary(settings: "ContactConfig") -> None:
    """Log the loaded configuration, one setting per line.

    Args:
        settings: ContactConfig instance with loaded configuration.
    """
    recipients = settings.get_recipients()
    lines = [
        ("Service", f"{settings.SERVICE_NAME} {settings.SERVICE_VERSION}"),
        ("Listen", f"{settings.API_HOST}:{settings.API_PORT}"),
        ("SMTP relay", f"{settings.SMTP_HOST}:{settings.SMTP_PORT}"),
        ("SMTP user", settings.SMTP_USER or "(not set)"),
        ("SMTP password", _mask_password(settings.SMTP_PASSWORD)),
        ("STARTTLS", str(settings.SMTP_USE_TLS).lower()),
        ("From", settings.MAIL_FROM),
        ("Recipients", ", ".join(recipients) if recipients else "(none)"),
        ("Backup dir", settings.BACKUP_DIR),
        ("Log level", settings.LOG_LEVEL),
    ]
    logger.info("=" * 60)
    for label, value in lines:
        logger.info(f"  {label:<16} {value}")
    logger.info("=" * 60)


def setup_logging(
    log_dir: Path | str | None = None,
    log_level: str = "INFO",
    file_level: str = "DEBUG",
    console_level: str | None = None,
    enable_file: bool = True,
    settings: Optional["ContactConfig"] = None,
) -> None:
    """Configure root logger with file and console handlers.

    Should be called once at application startup, before the server starts.

    Args:
        log_dir: Directory for log files. Defaults to ./logs.
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_level: File handler level (usually DEBUG for comprehensive logging).
        console_level: Console handler level. Defaults to log_level.
        enable_file: Whether to write logs to files.
        settings: Optional ContactConfig for logging a configuration summary.
    """
    log_path = Path(log_dir) if log_dir else Path("./logs")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

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
        log_path.mkdir(parents=True, exist_ok=True)
        detailed = logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT)

        # 10MB per file, keep 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_path / "contact_service.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
        file_handler.setFormatter(detailed)
        root_logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            log_path / "contact_service.error.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed)
        root_logger.addHandler(error_handler)

    for module_name, level in _MODULE_LEVELS.items():
        logging.getLogger(module_name).setLevel(level)

    if settings:
        log_config_summary(settings)


def get_logger(name: str, log_level: str | None = None) -> logging.Logger:
    """Get a logger instance for a module.

    Call setup_logging() once at startup for full configuration.

    Args:
        name: Logger name (typically __name__ of calling module).
        log_level: Optional override for logger level.

    Returns:
        Logger instance ready for use.

    Example:
        from contact_service.core.logger import get_logger

        logger = get_logger(__name__)
        logger.info("Message archived")
    """
    logger = logging.getLogger(name)

    if log_level:
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


def log_context(
    operation: str,
    recipient: str | None = None,
    **kwargs,
) -> str:
    """Format a log context string with metadata.

    Args:
        operation: Operation name (e.g., "deliver", "archive").
        recipient: Submitter or recipient email if applicable.
        **kwargs: Additional context key-value pairs.

    Returns:
        Formatted context string for logging.

    Example:
        msg = log_context("deliver", recipient="user@example.com", recipients=2)
        # deliver | →user@example.com (recipients=2)
    """
    context_parts = [operation]

    if recipient:
        context_parts.append(f"→{recipient}")

    context = " | ".join(context_parts)

    if kwargs:
        extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        context = f"{context} ({extra})"

    return context
