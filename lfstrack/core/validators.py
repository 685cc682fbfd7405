"""
lfstrack Foundation: Input Validators.

This module provides validation for requested track patterns and for the
configuration dictionary assembled from files, environment and CLI flags.
"""
from typing import Any, Dict

from lfstrack.core.constants import ConfigKey, ErrorCode

MAX_PATTERN_LENGTH = 4096
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_pattern(pattern: str) -> bool:
    """Validate a pattern requested for tracking.

    Spaces are allowed since they are escaped when written. Any other
    whitespace or control character would split or terminate the
    attribute line and is rejected.

    Args:
        pattern: Pattern to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If pattern is invalid
    """
    if not isinstance(pattern, str):
        raise ValidationError(f"Pattern must be string, got {type(pattern)}")

    if not pattern.strip():
        raise ValidationError("Pattern cannot be empty")

    if len(pattern) > MAX_PATTERN_LENGTH:
        raise ValidationError(f"Pattern exceeds maximum length ({MAX_PATTERN_LENGTH})")

    if "\0" in pattern:
        raise ValidationError(f"Invalid pattern {pattern!r}: contains null bytes")

    if "\n" in pattern or "\r" in pattern:
        raise ValidationError(f"Invalid pattern {pattern!r}: contains a line break")

    if any(ord(c) < 32 for c in pattern):
        raise ValidationError(f"Invalid pattern {pattern!r}: contains control characters")

    return True


def validate_log_level(level: Any) -> bool:
    """Validate a log level name.

    Raises:
        ValidationError: If the level is unknown
    """
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        choices = ", ".join(LOG_LEVELS)
        raise ValidationError(f"Invalid log level: {level!r}. Expected one of {choices}")
    return True


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate the merged lfstrack configuration.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    track = config.get(ConfigKey.TRACK, {})
    if not isinstance(track, dict):
        raise ValidationError("'track' section must be a dictionary")

    for key in (ConfigKey.LOCKABLE, ConfigKey.DRY_RUN, ConfigKey.VERBOSE):
        if key in track and not isinstance(track[key], bool):
            raise ValidationError(
                f"track.{key} must be a boolean, got {type(track[key]).__name__}"
            )

    logging_config = config.get(ConfigKey.LOGGING, {})
    if not isinstance(logging_config, dict):
        raise ValidationError("'logging' section must be a dictionary")

    if ConfigKey.LEVEL in logging_config:
        validate_log_level(logging_config[ConfigKey.LEVEL])

    log_file = logging_config.get(ConfigKey.FILE)
    if log_file is not None and not isinstance(log_file, str):
        raise ValidationError("logging.file must be a string path")

    return True
