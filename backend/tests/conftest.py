import os
import tempfile
import zipfile
from collections.abc import Callable, Generator
from pathlib import Path

os.environ.setdefault("KCC_DATA_DIR", tempfile.mkdtemp(prefix="kcc-tests-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import kcd2_conflict_checker.models  # noqa: E402, F401
from kcd2_conflict_checker.database import get_session  # noqa: E402
from kcd2_conflict_checker.main import app  # noqa: E402
from kcd2_conflict_checker.services.scan_jobs import ScanJobRunner, get_scan_runner  # noqa: E402
from kcd2_conflict_checker.services.scan_service import ModScanner  # noqa: E402

MakePak = Callable[[Path, dict[str, bytes]], Path]


def write_pak(path: Path, files: dict[str, bytes]) -> Path:
    """Create a zip-format package with the given entry -> content mapping."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_STORED) as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return path


@pytest.fixture
def make_pak() -> MakePak:
    return write_pak


@pytest.fixture
def game_dir(tmp_path) -> Path:
    """An empty KCD2 install with a ``Mods`` folder."""
    game = tmp_path / "KingdomComeDeliverance2"
    (game / "Mods").mkdir(parents=True)
    return game


@pytest.fixture
def steam_dir(tmp_path) -> Path:
    """An empty Steam install with the game's workshop content folder."""
    steam = tmp_path / "Steam"
    (steam / "steamapps" / "workshop" / "content" / "1771300").mkdir(parents=True)
    return steam


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(eng)
    return eng


@pytest.fixture
def session(engine, monkeypatch):
    monkeypatch.setattr("kcd2_conflict_checker.database.engine", engine)
    with Session(engine) as sess:
        yield sess


@pytest.fixture
def scan_runner() -> ScanJobRunner:
    """A runner whose scanner never touches the network."""
    return ScanJobRunner(ModScanner(lookup_factory=None))


@pytest.fixture
def client(engine, monkeypatch, scan_runner) -> Generator[TestClient, None, None]:
    monkeypatch.setattr("kcd2_conflict_checker.database.engine", engine)

    def _override_session() -> Generator[Session, None, None]:
        with Session(engine) as sess:
            yield sess

    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_scan_runner] = lambda: scan_runner
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
    app.dependency_overrides.clear()
