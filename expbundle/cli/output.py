"""Console output for CLI operations.

This module provides:
- ConsoleDiagnostics: Diagnostics sink printing traces and JSON values
- handle_error: Formatted error messages with context and optional stack traces
"""

import json
import sys
import traceback
from typing import Any, TextIO


class ConsoleDiagnostics:
    """Diagnostics sink that writes to the console.

    Traces, including intermediate JSON values such as query results, are
    only shown in verbose mode and go to ``trace_stream``. Final JSON values
    are pretty-printed with 2-space indentation, unless ``machine`` is set,
    in which case previews are suppressed and the caller prints the result
    itself.

    Example:
        diagnostics = ConsoleDiagnostics(verbose=True)
        diagnostics.trace("searching in header")
        diagnostics.show_json({"regions": []})
    """

    def __init__(
        self,
        verbose: bool = False,
        machine: bool = False,
        stream: TextIO | None = None,
        trace_stream: TextIO | None = None,
    ):
        """Initialize the sink.

        Args:
            verbose: Whether traces are displayed (default False)
            machine: Suppress JSON display for machine-readable output
            stream: Output stream for JSON values (default sys.stdout)
            trace_stream: Output stream for traces (default sys.stderr)
        """
        self.verbose = verbose
        self.machine = machine
        self.stream = stream if stream is not None else sys.stdout
        self.trace_stream = trace_stream if trace_stream is not None else sys.stderr

    def trace(self, message: str) -> None:
        if self.verbose:
            print(message, file=self.trace_stream)

    def trace_json(self, value: Any) -> None:
        if self.verbose:
            print(json.dumps(value, indent=2, ensure_ascii=False), file=self.trace_stream)

    def show_json(self, value: Any) -> None:
        if not self.machine:
            print(json.dumps(value, indent=2, ensure_ascii=False), file=self.stream)


def handle_error(error: Exception, verbose: bool = False) -> None:
    """Format and display error message with context.

    Displays error messages to stderr with optional context fields from
    ExpBundleError exceptions. When verbose mode is enabled, also displays
    the full stack trace.

    Args:
        error: Exception to display
        verbose: Whether to show stack trace (default False)

    Example:
        try:
            # ... operation ...
        except ExpBundleError as e:
            handle_error(e, verbose=True)
    """
    message = getattr(error, "message", None) or str(error)
    print(f"Error: {message}", file=sys.stderr)

    # ExpBundleError carries a context mapping
    if getattr(error, "context", None):
        print("Context:", file=sys.stderr)
        for key, value in error.context.items():
            print(f"  {key}: {value}", file=sys.stderr)

    if verbose:
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)
