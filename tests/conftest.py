import os
from collections.abc import Callable

import pytest
from hypothesis import HealthCheck, settings

from bl.bl_constants import END_OF_INPUT
from bl.bl_lexer import TokenQueue

settings.register_profile(
    "ci", max_examples=300, suppress_health_check=[HealthCheck.too_slow]
)
settings.register_profile("dev", max_examples=50)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture  # type: ignore[misc]
def make_queue() -> Callable[..., TokenQueue]:
    """Build a TokenQueue from bare tokens, appending the end-of-input sentinel."""

    def _make(*tokens: str) -> TokenQueue:
        return TokenQueue([*tokens, END_OF_INPUT])

    return _make
