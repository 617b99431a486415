"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tabtab.exceptions.TabtabError` subclass.
Shell wrappers can inspect the exit code to tell an unsupported shell from a
bad invocation without parsing stderr.

Example::

    $ SHELL=/bin/tcsh tabtab install mycli
    $ echo $?
    3   # EXIT_UNSUPPORTED_SHELL -- no completion dialect for tcsh
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_UNSUPPORTED_SHELL = 3
"""The current shell could not be resolved to bash, zsh or fish."""

EXIT_MALFORMED_INPUT = 4
"""A completion callback handed the emitter something that is not a candidate list."""

EXIT_IO_ERROR = 5
"""A shell config file or completion script could not be read or written."""
