from __future__ import annotations

from typing import Any, Dict

import pytest

from tests._fixtures.declarations import DeclarationBuilder
from tests._fixtures.typedoc_project import alarms_project


@pytest.fixture
def builder() -> DeclarationBuilder:
    """Provide a declaration builder handing out fresh positive ids."""
    return DeclarationBuilder()


@pytest.fixture
def alarms_json() -> Dict[str, Any]:
    """Provide the decoded TypeDoc JSON for a small `chrome.alarms` API."""
    return alarms_project()
