"""lfstrack Core - shared constants and input validation.

Import specific names from submodules:
    from lfstrack.core.constants import ErrorCode, ExitStatus
    from lfstrack.core.validators import ValidationError, validate_pattern
"""

from lfstrack.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
