"""Input validation for arguments handed to external tools."""

import logging

from depstage.errors import InvalidSourceError

logger = logging.getLogger("depstage.utils.validation")


def ensure_safe_argument(value: str, what: str = "argument") -> str:
    """Reject values an external tool would parse as an option.

    Args:
        value: URL, path, branch or revision about to be passed to a command.
        what: Description used in the error message.

    Returns:
        str: ``value`` unchanged.

    Raises:
        InvalidSourceError: If the value is empty, starts with '-', or
            contains a newline.
    """
    if not value:
        raise InvalidSourceError(f"Empty {what}")

    # Prevent argument injection
    if value.startswith("-"):
        logger.warning("%s starts with '-': %s", what, value)
        raise InvalidSourceError(f"Refusing {what} starting with '-': {value}")

    if "\n" in value or "\r" in value:
        raise InvalidSourceError(f"Refusing {what} containing a newline: {value!r}")

    return value


__all__ = ["ensure_safe_argument"]
