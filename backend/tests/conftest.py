import sys
from pathlib import Path

# Make `services`, `domain`, `api` and `settings` importable when pytest is run
# from the repository root or from backend/.
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
