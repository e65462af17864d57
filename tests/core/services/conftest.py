import itertools

import pytest

from report_outline.core.services.outline_editing_service import OutlineEditingService


@pytest.fixture
def service():
    """Editing service with predictable ids for new headers (N1, N2, ...)."""
    counter = itertools.count(1)
    return OutlineEditingService(id_factory=lambda: f"N{next(counter)}")
