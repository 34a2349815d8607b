"""Shared pytest fixtures for the crosstype test suite."""

from __future__ import annotations

import pytest

from tests.helpers import reasonml, typescript


@pytest.fixture(params=["reasonml", "typescript"])
def language(request):
    """Each backend with an empty override table and no banner."""
    return reasonml() if request.param == "reasonml" else typescript()
