import os
import sys
from pathlib import Path

import pytest

# Pin local backends before anything imports snapsolve.
os.environ["SNAPSOLVE_SKIP_DOTENV"] = "1"
os.environ["SNAPSOLVE_LLM_BACKEND"] = "mock"
os.environ["SNAPSOLVE_API_PREFIX"] = "/api/mcq"
os.environ["SNAPSOLVE_LLM_TIMEOUT_SECONDS"] = "5"
os.environ["SNAPSOLVE_RENDER_WORKERS"] = "2"
os.environ["GEMINI_API_KEY"] = ""

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

TEST_DB_PATH = BACKEND_ROOT / "test_snapsolve.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()


@pytest.fixture
def client():
    from snapsolve.main import app
    from tests.http_client import SyncASGIClient

    app.dependency_overrides.clear()
    yield SyncASGIClient(app, prefix="/api/mcq")
    app.dependency_overrides.clear()
