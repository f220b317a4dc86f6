"""Public test-support utilities for metric_time.

Provided symbols:

- :class:`FakeTimeSource` — deterministic wall-clock source.
- :func:`make_settings` — factory for ``Settings`` without ``.env`` files.
"""

from metric_time.testing._settings import make_settings
from metric_time.testing._source import FakeTimeSource

__all__ = [
    "FakeTimeSource",
    "make_settings",
]
