import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SECURITY__SECRET_KEY", "tests-secret-key")
os.environ.setdefault("SECURITY__BCRYPT_ROUNDS", "4")
os.environ.setdefault(
    "DATABASE__URL",
    "sqlite+aiosqlite:///" + str(Path(tempfile.gettempdir()) / "djibgo-tests.sqlite3"),
)
os.environ.setdefault("DATABASE__CREATE_TABLES", "false")

from tests.fakes import InMemoryDeliveryLog, InMemoryIdentityStore, InMemoryProfileRepository


@pytest.fixture
def identity_store():
    return InMemoryIdentityStore()


@pytest.fixture
def profiles():
    return InMemoryProfileRepository()


@pytest.fixture
def deliveries():
    return InMemoryDeliveryLog()
