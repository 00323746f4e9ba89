import sys
from pathlib import Path

import pytest

# Ensure 'src' directory is on sys.path for imports
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))


@pytest.fixture
def env():
    """Isolated environment mapping passed to the loaders instead of os.environ."""
    return {}
