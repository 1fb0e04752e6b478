"""Shared test fixtures and Hypothesis strategies for expbundle tests."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from hypothesis import strategies as st
from hypothesis.strategies import composite

# Small id alphabet so generated documents regularly contain duplicate ids
COMPONENT_IDS = ["hero", "nav", "footer", "banner", "tile"]


@composite
def page_document(draw: st.DrawFn) -> dict[str, Any]:
    """Generate random page documents for property-based testing.

    Documents have 0-4 regions with 0-4 components each. Component ids are
    drawn from a small pool, so the same id often appears several times.

    Example:
        >>> from hypothesis import given
        >>> @given(page_document())
        ... def test_something(doc):
        ...     assert "regions" in doc
    """
    region_count = draw(st.integers(min_value=0, max_value=4))
    regions = []
    for region_index in range(region_count):
        component_ids = draw(st.lists(st.sampled_from(COMPONENT_IDS), max_size=4))
        regions.append(
            {
                "regionName": f"region{region_index}",
                "components": [
                    {"id": component_id, "componentAttributes": {"title": f"r{region_index}c{i}"}}
                    for i, component_id in enumerate(component_ids)
                ],
            }
        )
    return {"regions": regions}


@composite
def embedded_json_object(draw: st.DrawFn) -> dict[str, Any]:
    """Generate JSON objects as they appear embedded in component properties."""
    return draw(
        st.dictionaries(
            keys=st.text(min_size=1, max_size=10),
            values=st.one_of(
                st.none(),
                st.booleans(),
                st.integers(min_value=-1000, max_value=1000),
                st.text(max_size=20),
            ),
            max_size=5,
        )
    )


def make_document(attributes: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return the single-component document used across scenarios."""
    return {
        "regions": [
            {
                "regionName": "r1",
                "components": [
                    {
                        "id": "abc",
                        "componentAttributes": attributes if attributes is not None else {"title": "Old"},
                    }
                ],
            }
        ]
    }


@pytest.fixture
def sample_document() -> dict[str, Any]:
    return make_document()


@pytest.fixture
def page_file(tmp_path: Path, sample_document: dict[str, Any]) -> Path:
    """Write the sample document to a page JSON file."""
    path = tmp_path / "home.json"
    path.write_text(json.dumps(sample_document, indent=2) + "\n", encoding="utf-8")
    return path


class FakeQueryClient:
    """QueryClient returning canned records and recording the calls made."""

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self.records = records or []
        self.calls: list[tuple[str, bool]] = []

    def query(self, soql: str, use_tooling: bool = False) -> dict[str, Any]:
        self.calls.append((soql, use_tooling))
        return {"totalSize": len(self.records), "done": True, "records": self.records}


@dataclass(frozen=True)
class FakeSession:
    org_id: str = "00D5e000000abcdEAA"
    username: str = "admin@example.com"
    instance_url: str = "https://acme.my.salesforce.com/"


class RecordingDiagnostics:
    """Diagnostics sink keeping everything it receives."""

    def __init__(self) -> None:
        self.traces: list[str] = []
        self.shown: list[Any] = []
        self.traced_json: list[Any] = []

    def trace(self, message: str) -> None:
        self.traces.append(message)

    def trace_json(self, value: Any) -> None:
        self.traced_json.append(value)

    def show_json(self, value: Any) -> None:
        self.shown.append(value)


@pytest.fixture
def diagnostics() -> RecordingDiagnostics:
    return RecordingDiagnostics()
