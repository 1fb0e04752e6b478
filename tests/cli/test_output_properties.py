"""Property-based tests for console output.

This module tests:
- Stream separation (JSON on stdout, traces and errors on stderr)
- Verbose and machine-readable modes of the diagnostics sink
- Error formatting with context
"""

import io
import json

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from expbundle.cli.output import ConsoleDiagnostics, handle_error
from expbundle.core.exceptions import StorageError

json_values = st.recursive(
    st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=10)),
    lambda children: st.one_of(
        st.lists(children, max_size=3),
        st.dictionaries(st.text(max_size=5), children, max_size=3),
    ),
    max_leaves=10,
)


@given(value=json_values)
@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_property_show_json_round_trips(value):
    """Whatever is shown decodes back to the same value."""
    out = io.StringIO()
    ConsoleDiagnostics(stream=out).show_json(value)
    assert json.loads(out.getvalue()) == value


@given(message=st.text(max_size=40), verbose=st.booleans())
@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_property_traces_only_in_verbose_mode(message, verbose):
    out, err = io.StringIO(), io.StringIO()
    ConsoleDiagnostics(verbose=verbose, stream=out, trace_stream=err).trace(message)

    assert out.getvalue() == ""
    assert err.getvalue() == (f"{message}\n" if verbose else "")


def test_machine_mode_suppresses_json():
    out = io.StringIO()
    ConsoleDiagnostics(machine=True, stream=out).show_json({"regions": []})
    assert out.getvalue() == ""


def test_show_json_uses_two_space_indent():
    out = io.StringIO()
    ConsoleDiagnostics(stream=out).show_json({"label": "Café"})
    assert out.getvalue() == '{\n  "label": "Café"\n}\n'


def test_handle_error_prints_message_and_context(capsys):
    handle_error(StorageError("Cannot read document", file_path="home.json", operation="load"))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines() == [
        "Error: Cannot read document",
        "Context:",
        "  file_path: home.json",
        "  operation: load",
    ]


def test_handle_error_plain_exception(capsys):
    handle_error(ValueError("boom"))
    assert capsys.readouterr().err == "Error: boom\n"


@given(value=json_values, verbose=st.booleans())
@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_property_traced_json_only_in_verbose_mode(value, verbose):
    """Intermediate JSON never reaches the output stream."""
    out, err = io.StringIO(), io.StringIO()
    ConsoleDiagnostics(verbose=verbose, stream=out, trace_stream=err).trace_json(value)

    assert out.getvalue() == ""
    if verbose:
        assert json.loads(err.getvalue()) == value
    else:
        assert err.getvalue() == ""
