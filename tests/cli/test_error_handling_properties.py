"""Property-based tests for error handling.

This module tests universal properties of error handling including:
- Exit code mapping for different error types
- Error context preservation
- Stack traces in verbose mode
"""

from pathlib import Path
from unittest.mock import patch

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from expbundle.cli.commands import modify
from expbundle.cli.exit_codes import ExitCode
from expbundle.core.exceptions import (
    AmbiguousQueryError,
    ConfigurationError,
    MalformedEmbeddedJsonError,
    NoRecordsError,
    NotFoundError,
    QueryError,
    StorageError,
    UpdateError,
)

EXPECTED_EXIT_CODES = {
    ConfigurationError: ExitCode.CONFIG_ERROR,
    NotFoundError: ExitCode.NOT_FOUND_ERROR,
    StorageError: ExitCode.STORAGE_ERROR,
    QueryError: ExitCode.QUERY_ERROR,
    NoRecordsError: ExitCode.QUERY_ERROR,
    AmbiguousQueryError: ExitCode.QUERY_ERROR,
    MalformedEmbeddedJsonError: ExitCode.PATCH_ERROR,
    UpdateError: ExitCode.UNEXPECTED_ERROR,
    RuntimeError: ExitCode.UNEXPECTED_ERROR,
}


@given(error_type=st.sampled_from(list(EXPECTED_EXIT_CODES)))
@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_property_exit_code_mapping(error_type, page_file: Path):
    """Each error raised during the update maps to its documented exit code."""
    with patch("expbundle.cli.commands.update_document") as mock_update:
        mock_update.side_effect = error_type("Test error")

        exit_code = modify(file=page_file, component_id="abc", property="title", value="New")

    assert exit_code == EXPECTED_EXIT_CODES[error_type], (
        f"Expected exit code {EXPECTED_EXIT_CODES[error_type]} for {error_type.__name__}, "
        f"got {exit_code}"
    )


@given(
    context_fields=st.dictionaries(
        keys=st.text(
            alphabet=st.characters(whitelist_categories=("Lu", "Ll")), min_size=1, max_size=20
        ).map(lambda key: f"field_{key}"),
        values=st.text(alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd")), max_size=30),
        min_size=1,
        max_size=5,
    ),
)
@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_property_error_context_preservation(context_fields, page_file: Path, capsys):
    """Every context field of an error appears in the CLI error output."""
    with patch("expbundle.cli.commands.update_document") as mock_update:
        mock_update.side_effect = NotFoundError("Test error with context", **context_fields)

        exit_code = modify(file=page_file, component_id="abc", property="title", value="New")

    assert exit_code == ExitCode.NOT_FOUND_ERROR
    error_output = capsys.readouterr().err
    assert "Error: Test error with context" in error_output
    for key, value in context_fields.items():
        assert f"  {key}: {value}" in error_output


def test_verbose_shows_stack_trace(page_file: Path, capsys):
    exit_code = modify(
        file=page_file, component_id="missing", property="title", value="New", verbose=True
    )

    assert exit_code == ExitCode.NOT_FOUND_ERROR
    err = capsys.readouterr().err
    assert "Stack trace:" in err
    assert "NotFoundError" in err


def test_non_verbose_hides_stack_trace(page_file: Path, capsys):
    modify(file=page_file, component_id="missing", property="title", value="New")

    err = capsys.readouterr().err
    assert "Stack trace:" not in err
    assert "component_id: missing" in err
