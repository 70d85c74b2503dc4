from __future__ import annotations

import pytest

from fakes import SleepRecorder


@pytest.fixture()
def sleeper() -> SleepRecorder:
    """Records requested delays instead of sleeping."""
    return SleepRecorder()
