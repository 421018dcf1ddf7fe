import sys
from pathlib import Path

import pytest

# Ensure the project root is importable when running pytest without installing.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from maps_places.config import build_settings  # noqa: E402


@pytest.fixture
def fast_settings():
    """Settings with every pacing delay disabled."""

    def _build(**overrides):
        values = {
            "queries": ["Laba africa expeditions"],
            "resolve_delay": 0,
            "review_scroll_delay": 0,
            "review_expand_delay": 0,
        }
        values.update(overrides)
        return build_settings(**values)

    return _build
