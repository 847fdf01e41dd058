import copy
import json
import logging
import math
import os
import tempfile
from threading import Lock
from typing import Any, Iterable, Protocol

from .errors import InvalidInput, NotFound

log = logging.getLogger(__name__)

DEFAULT_TIERS = ("easy", "medium", "hard")

Document = dict[str, Any]


class DocumentStorage(Protocol):
    def load(self) -> Document | None: ...

    def save(self, document: Document) -> None: ...


class JsonFileStorage:
    """Whole-document JSON persistence backed by a single file.

    Writes land in a temp file next to the target and are moved into place
    with ``os.replace`` so readers never see a half-written document.
    """

    def __init__(self, path: str) -> None:
        self.path = os.fspath(path)

    def load(self) -> Document | None:
        if not os.path.exists(self.path):
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, document: Document) -> None:
        dir_name = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(dir_name, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=dir_name, prefix=".leaderboard.", text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(temp_path, self.path)
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)


class MemoryStorage:
    def __init__(self, document: Document | None = None) -> None:
        self._document = copy.deepcopy(document)
        self.saves = 0

    def load(self) -> Document | None:
        return copy.deepcopy(self._document)

    def save(self, document: Document) -> None:
        self._document = copy.deepcopy(document)
        self.saves += 1


def validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput("Invalid name")
    return name.strip()


def is_score(value: Any) -> bool:
    # bool is an int subclass but never a score
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_score(score: Any) -> float:
    if not is_score(score):
        raise InvalidInput("Invalid score")
    try:
        finite = math.isfinite(score)
    except OverflowError:
        raise InvalidInput("Invalid score") from None
    if not finite or score < 0:
        raise InvalidInput("Invalid score")
    return score


def rank(scores: dict[str, Any]) -> list[dict[str, Any]]:
    # tier buckets left over from a tiered document are not players
    entries = [(name, score) for name, score in scores.items() if is_score(score)]
    ordered = sorted(entries, key=lambda item: (-item[1], item[0]))
    return [{"name": name, "score": score} for name, score in ordered]


class LeaderboardStore:
    """Best-score-per-player leaderboard, optionally split into difficulty tiers.

    Every operation reloads the full document from storage and writes the full
    document back when it changes. The lock serializes those load-mutate-save
    sequences within this process.
    """

    def __init__(self, storage: DocumentStorage, tiers: Iterable[str] | None = DEFAULT_TIERS) -> None:
        self.storage = storage
        self.tiers = tuple(tiers or ())
        self._lock = Lock()

    @property
    def tiered(self) -> bool:
        return bool(self.tiers)

    def empty_document(self) -> Document:
        return {tier: {} for tier in self.tiers}

    def validate_tier(self, tier: str | None) -> str | None:
        if not self.tiered:
            return None
        if tier not in self.tiers:
            raise InvalidInput("Invalid difficulty")
        return tier

    def load(self) -> Document:
        document = self.storage.load()
        if document is None:
            return self.empty_document()
        for tier in self.tiers:
            if not isinstance(document.get(tier), dict):
                document[tier] = {}
        return document

    def save(self, document: Document) -> None:
        self.storage.save(document)

    def _scores(self, document: Document, tier: str | None) -> dict[str, Any]:
        return document[tier] if self.tiered else document

    def submit_score(self, name: str, score: float, tier: str | None = None) -> bool:
        tier = self.validate_tier(tier)
        name = validate_name(name)
        score = validate_score(score)
        with self._lock:
            document = self.load()
            scores = self._scores(document, tier)
            if is_score(scores.get(name)) and score <= scores[name]:
                log.debug("Ignored %s for %s (best %s)", score, name, scores[name])
                return False
            scores[name] = score
            self.save(document)
        log.info("Recorded %s for %s%s", score, name, f" in {tier}" if tier else "")
        return True

    def get_ranking(self, tier: str | None = None) -> list[dict[str, Any]]:
        tier = self.validate_tier(tier)
        with self._lock:
            document = self.load()
        return rank(self._scores(document, tier))

    def admin_set_score(self, name: str, score: float, tier: str | None = None) -> str:
        tier = self.validate_tier(tier)
        name = validate_name(name)
        score = validate_score(score)
        with self._lock:
            document = self.load()
            self._scores(document, tier)[name] = score
            self.save(document)
        log.info("Admin set %s to %s%s", name, score, f" in {tier}" if tier else "")
        return name

    def admin_delete_player(self, name: str, tier: str | None = None) -> str:
        tier = self.validate_tier(tier)
        name = validate_name(name)
        with self._lock:
            document = self.load()
            scores = self._scores(document, tier)
            if name not in scores:
                raise NotFound("Player not found")
            del scores[name]
            self.save(document)
        log.info("Admin removed %s%s", name, f" from {tier}" if tier else "")
        return name

    def admin_reset_tier(self, tier: str | None = None) -> None:
        tier = self.validate_tier(tier)
        with self._lock:
            if not self.tiered:
                self.save(self.empty_document())
            else:
                document = self.load()
                document[tier] = {}
                self.save(document)
        log.info("Admin reset %s", tier or "leaderboard")

    def admin_wipe_all(self) -> None:
        with self._lock:
            self.save(self.empty_document())
        log.info("Admin wiped all leaderboards")
