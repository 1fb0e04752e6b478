"""Fixtures shared by CLI tests."""

import logging
from typing import Any

import pytest

from expbundle.cli.config import CONNECTION_KEYS, ENV_PREFIX
from expbundle.connectors.salesforce import OrgSession


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real EXPBUNDLE_* variables out of CLI tests."""
    for key in CONNECTION_KEYS:
        monkeypatch.delenv(f"{ENV_PREFIX}{key.upper()}", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by configure_logging after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.WARNING)


class FakeSalesforceClient:
    """Stand-in for SalesforceClient used by the modify command."""

    records: list[dict[str, Any]] = []
    instances: list["FakeSalesforceClient"] = []

    def __init__(self, settings) -> None:
        self.settings = settings
        self.calls: list[tuple[str, bool]] = []
        self.closed = False
        FakeSalesforceClient.instances.append(self)

    def __enter__(self) -> "FakeSalesforceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def query(self, soql: str, use_tooling: bool = False) -> dict[str, Any]:
        self.calls.append((soql, use_tooling))
        return {"totalSize": len(self.records), "done": True, "records": self.records}

    def session(self) -> OrgSession:
        return OrgSession(
            org_id="00D5e000000abcdEAA",
            username="me@acme.com",
            instance_url=self.settings.instance_url,
        )


@pytest.fixture
def fake_salesforce(monkeypatch):
    """Replace SalesforceClient in the commands module; returns the fake class."""
    FakeSalesforceClient.records = []
    FakeSalesforceClient.instances = []
    monkeypatch.setattr("expbundle.cli.commands.SalesforceClient", FakeSalesforceClient)
    return FakeSalesforceClient


@pytest.fixture
def connection_args() -> dict[str, str]:
    return {"instance_url": "https://acme.my.salesforce.com/", "access_token": "tok"}
