import os
import sys

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from tests.helpers import fill_pattern, pattern_color  # noqa: E402

__all__ = [
    "fill_pattern",
    "pattern_color",
]
