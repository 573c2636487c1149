import sys
from pathlib import Path


# Ensure `src/` is on sys.path so tests can import local modules
# like `spatial.*`, `distance.*`, `strategy.*`, and `main`.
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_ROOT))
