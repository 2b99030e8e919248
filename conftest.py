"""Put the project root on ``sys.path`` so ``app``, ``lagging``, ``third_party``
and ``utils`` import the same way they do under uvicorn."""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
