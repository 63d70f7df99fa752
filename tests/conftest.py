from __future__ import annotations

import sys
from pathlib import Path


# Ensure the project root is importable when running `pytest` via its entrypoint,
# where `sys.path[0]` may not be the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))
