"""Error message formatting for CLI output.

Turns any exception into a non-empty, one-line message, and includes the
underlying cause for wrapped registry errors (e.g. a ConfigurationError
raised because a fallback file is missing).
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

# Messages for exception types whose str() is commonly empty
FRIENDLY_MESSAGES: dict[type, str] = {
    FileNotFoundError: "File not found.",
    PermissionError: "Permission denied.",
    IsADirectoryError: "Expected a file but found a directory.",
    EOFError: "Unexpected end of resource data.",
    KeyboardInterrupt: "Operation interrupted by user.",
}


def format_error_message(e: BaseException, *, include_type: bool = True, include_cause: bool = True) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to prefix the exception type name
        include_cause: Whether to append the explicit __cause__, if any

    Returns:
        A non-empty message

    Examples:
        >>> format_error_message(ValueError("bad"))
        'ValueError: bad'

        >>> format_error_message(PermissionError())
        'PermissionError: Permission denied.'
    """
    message = _format_single(e, include_type)

    if include_cause and e.__cause__ is not None:
        message += f" (caused by {_format_single(e.__cause__, include_type=True)})"

    return message


def _format_single(e: BaseException, include_type: bool) -> str:
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Identifiers and paths can contain brackets that Rich would otherwise
    treat as markup tags.
    """
    return _escape_markup(str(value))
