import pytest

from leaderboard_api.config import Settings
from leaderboard_api.server import create_app
from leaderboard_api.store import LeaderboardStore, MemoryStorage

ADMIN = ("admin", "s3cret")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return LeaderboardStore(storage)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        leaderboard_file=str(tmp_path / "leaderboard.json"),
        admin_user=ADMIN[0],
        admin_pass=ADMIN[1],
    )


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store)
    app.testing = True
    return app.test_client()
