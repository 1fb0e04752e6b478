"""Unit tests for the page document model and resolution modes."""

import dataclasses

import pytest

from expbundle.core.schema import (
    ComponentLocation,
    LiteralSource,
    OrgVariable,
    PatchTarget,
    QuerySource,
    VariableSource,
    component_at,
    is_page_document,
)
from tests.conftest import make_document


class TestIsPageDocument:
    def test_regions_list(self) -> None:
        assert is_page_document({"regions": []})
        assert is_page_document(make_document())

    @pytest.mark.parametrize("value", [None, [], {}, {"regions": None}, {"regions": {}}, "regions"])
    def test_rejects_other_shapes(self, value) -> None:
        assert not is_page_document(value)


def test_component_at_returns_the_component():
    document = {
        "regions": [
            {"regionName": "a", "components": [{"id": "x"}]},
            {"regionName": "b", "components": [{"id": "y"}, {"id": "z"}]},
        ]
    }
    assert component_at(document, ComponentLocation(1, 1)) == {"id": "z"}


def test_query_source_defaults():
    mode = QuerySource("SELECT Id FROM Organization")
    assert mode.field == "Id"
    assert mode.use_tooling_api is False
    assert mode.truncate is False


def test_org_variable_values():
    assert [v.value for v in OrgVariable] == ["OrgId", "InstanceUrl", "Username"]
    assert OrgVariable("OrgId") is OrgVariable.ORG_ID


def test_patch_target_without_subproperty():
    assert PatchTarget("title").subproperty is None


@pytest.mark.parametrize(
    "instance",
    [
        LiteralSource("x"),
        QuerySource("SELECT Id FROM Account"),
        VariableSource(OrgVariable.USERNAME),
        PatchTarget("title"),
        ComponentLocation(0, 0),
    ],
)
def test_model_objects_are_frozen(instance):
    field_name = dataclasses.fields(instance)[0].name
    with pytest.raises(dataclasses.FrozenInstanceError):
        setattr(instance, field_name, "changed")
