"""Exit code constants for CLI commands.

This module defines standard exit codes for different error conditions,
following Unix conventions where 0 indicates success and non-zero values
indicate different types of failures.

Exit codes:
    0: SUCCESS - Operation completed successfully
    1: UNEXPECTED_ERROR - Unexpected/unhandled exception
    2: NOT_FOUND_ERROR - No component matches the given id
    3: STORAGE_ERROR - Document could not be read or written
    4: QUERY_ERROR - Org query failed or did not match exactly one record
    5: PATCH_ERROR - Sub-property target is not embedded JSON
    6: CONFIG_ERROR - Configuration file or argument error
"""


class ExitCode:
    """Standard exit codes for CLI commands.

    Example:
        >>> from expbundle.cli.exit_codes import ExitCode
        >>> import sys
        >>>
        >>> try:
        ...     # ... operation ...
        ...     sys.exit(ExitCode.SUCCESS)
        ... except NotFoundError:
        ...     sys.exit(ExitCode.NOT_FOUND_ERROR)
    """

    SUCCESS = 0
    """Operation completed successfully."""

    UNEXPECTED_ERROR = 1
    """Unexpected or unhandled exception occurred."""

    NOT_FOUND_ERROR = 2
    """No component in the document matches the given id."""

    STORAGE_ERROR = 3
    """Document reading or writing failed."""

    QUERY_ERROR = 4
    """Org query failed, returned no records, or returned several."""

    PATCH_ERROR = 5
    """Existing property value is not an embedded JSON object."""

    CONFIG_ERROR = 6
    """Configuration file or argument error."""
