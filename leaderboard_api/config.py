import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .store import DEFAULT_TIERS

PROJECT_ROOT = Path(__file__).resolve().parent.parent
FALSY = {"0", "false", "no", "off"}


def parse_tiers(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_TIERS
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def parse_flag(raw: str | None, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in FALSY


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 3001
    leaderboard_file: str = os.fspath(PROJECT_ROOT / "leaderboard.json")
    public_dir: str = os.fspath(PROJECT_ROOT / "public")
    tiers: tuple[str, ...] = field(default_factory=lambda: DEFAULT_TIERS)
    admin_auth: bool = True
    admin_user: str | None = None
    admin_pass: str | None = None
    admin_realm: str = "Leaderboard Admin"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        defaults = cls()
        return cls(
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", defaults.port)),
            leaderboard_file=os.getenv("LEADERBOARD_FILE", defaults.leaderboard_file),
            public_dir=os.getenv("PUBLIC_DIR", defaults.public_dir),
            tiers=parse_tiers(os.getenv("LEADERBOARD_TIERS")),
            admin_auth=parse_flag(os.getenv("ADMIN_AUTH"), defaults.admin_auth),
            admin_user=os.getenv("ADMIN_USER") or None,
            admin_pass=os.getenv("ADMIN_PASS") or None,
            admin_realm=os.getenv("ADMIN_REALM", defaults.admin_realm),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )
