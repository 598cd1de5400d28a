"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to an error category and is referenced by the
corresponding :class:`~wrench.exceptions.WrenchError` subclass. Scripts
driving wrench in CI can inspect the exit code to tell a malformed
invocation apart from a broken schema without parsing stderr.

Example::

    $ wrench --size 1024 show frame.yaml
    $ echo $?
    2   # EXIT_INVALID_USAGE -- the size was not WIDTHxHEIGHT
"""

EXIT_SUCCESS = 0
"""The command completed successfully (including ``--help`` and ``--version``)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
