"""Exception hierarchy for tabtab.

All exceptions inherit from :class:`TabtabError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tabtab.exit_codes`.
The top-level error handler in :func:`tabtab.app.main` catches
``TabtabError`` and exits with the appropriate code.

File-system failures are deliberately *not* part of this hierarchy: a failed
write of a completion script or a shell config block surfaces as the
original :class:`OSError`.

Subclass hierarchy::

    TabtabError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- ConfigurationError   (exit 3)
    +-- MalformedInputError  (exit 4)
"""

from tabtab.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_INPUT,
    EXIT_UNSUPPORTED_SHELL,
)


class TabtabError(Exception):
    """Base exception for all tabtab errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TabtabError):
    """Raised when a required field is missing (e.g. the tool name on uninstall).

    Always raised before any file is touched.
    """

    exit_code = EXIT_INVALID_USAGE


class ConfigurationError(TabtabError):
    """Raised when the shell dialect is unknown or cannot be resolved."""

    exit_code = EXIT_UNSUPPORTED_SHELL


class MalformedInputError(TabtabError):
    """Raised when the emitter receives something other than a candidate sequence."""

    exit_code = EXIT_MALFORMED_INPUT
