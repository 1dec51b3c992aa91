import os
import tempfile
from pathlib import Path

_DB_DIR = Path(tempfile.mkdtemp(prefix="leasing-migration-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"

import pytest  # noqa: E402

from leasing_migration.db.models import Base  # noqa: E402
from leasing_migration.db.session import ENGINE  # noqa: E402

FIXTURE_DIR = Path(__file__).parent / "parsers" / "fixtures"


@pytest.fixture(scope="session", autouse=True)
def _schema():
    Base.metadata.create_all(ENGINE)
    yield
    Base.metadata.drop_all(ENGINE)


@pytest.fixture
def media_document() -> str:
    return (FIXTURE_DIR / "media_export.xml").read_text(encoding="utf-8")


@pytest.fixture
def vehicle_document() -> str:
    return (FIXTURE_DIR / "vehicle_export.xml").read_text(encoding="utf-8")
