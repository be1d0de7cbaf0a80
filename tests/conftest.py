from __future__ import annotations

from pathlib import Path

import pytest

from sqlbound.core.mapping import FieldMapper

pytestmark = pytest.mark.anyio
here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def field_mapper() -> FieldMapper:
    """A field mapper isolated from the process-wide cache."""
    return FieldMapper()
