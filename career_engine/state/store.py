"""
Game state storage abstraction.

Separates persistence from engine logic for testability. The engine
never touches storage; the presentation layer saves after each turn.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from .schema import GameState

logger = logging.getLogger(__name__)


@runtime_checkable
class GameStateStore(Protocol):
    """
    Abstract storage interface for game sessions.

    Implementations:
    - JsonGameStore: File-based persistence (production)
    - MemoryGameStore: In-memory storage (testing)
    """

    def save(self, state: GameState) -> None:
        """Persist a session."""
        ...

    def load(self, session_id: str) -> GameState | None:
        """Load a session by ID. Returns None if not found."""
        ...

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns True if deleted."""
        ...

    def list_all(self) -> list[dict]:
        """List all sessions with metadata."""
        ...

    def exists(self, session_id: str) -> bool:
        """Check if a session exists."""
        ...


def _summary(state: GameState) -> dict:
    return {
        "id": state.session_id,
        "name": state.character_name,
        "role": state.role.value if state.role else None,
        "months": state.months,
        "stage": state.hunt_stage,
        "turns": state.turn,
    }


class JsonGameStore:
    """
    File-based session storage using JSON.

    Features:
    - Automatic backup on save
    - Partial ID matching on load
    """

    def __init__(self, saves_dir: Path | str = "saves"):
        self.saves_dir = Path(saves_dir)
        self.saves_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        return self.saves_dir / f"{session_id}.json"

    def save(self, state: GameState) -> None:
        """Save session to JSON file with backup."""
        save_file = self._path(state.session_id)

        # Backup previous save
        if save_file.exists():
            backup = save_file.with_suffix(".json.bak")
            backup.write_text(save_file.read_text())

        save_file.write_text(state.model_dump_json(indent=2))

    def load(self, session_id: str) -> GameState | None:
        """
        Load session by ID or unique prefix.

        Returns None if no save matches, the prefix is ambiguous, or
        the file can't be parsed.
        """
        save_file = self._path(session_id)
        if not save_file.exists():
            matches = [
                f for f in self.saves_dir.glob("*.json")
                if f.stem.startswith(session_id)
            ]
            if len(matches) != 1:
                return None
            save_file = matches[0]

        try:
            return GameState.model_validate_json(save_file.read_text())
        except (ValidationError, IOError) as e:
            logger.warning(f"Could not load save {save_file}: {e}")
            return None

    def delete(self, session_id: str) -> bool:
        save_file = self._path(session_id)
        if not save_file.exists():
            return False
        save_file.unlink()
        backup = save_file.with_suffix(".json.bak")
        if backup.exists():
            backup.unlink()
        return True

    def list_all(self) -> list[dict]:
        """List saves, most recently modified first."""
        sessions = []
        for save_file in self.saves_dir.glob("*.json"):
            try:
                data = json.loads(save_file.read_text())
                state = GameState.model_validate(data)
            except (json.JSONDecodeError, ValidationError, IOError) as e:
                logger.warning(f"Skipping unreadable save {save_file}: {e}")
                continue
            summary = _summary(state)
            summary["modified"] = datetime.fromtimestamp(save_file.stat().st_mtime).isoformat()
            sessions.append(summary)
        return sorted(sessions, key=lambda s: s["modified"], reverse=True)

    def exists(self, session_id: str) -> bool:
        return self._path(session_id).exists()


class MemoryGameStore:
    """
    In-memory session storage for testing.

    Stores serialized copies so callers can't mutate stored state.
    """

    def __init__(self):
        self._sessions: dict[str, str] = {}

    def save(self, state: GameState) -> None:
        self._sessions[state.session_id] = state.model_dump_json()

    def load(self, session_id: str) -> GameState | None:
        raw = self._sessions.get(session_id)
        if raw is None:
            return None
        return GameState.model_validate_json(raw)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def list_all(self) -> list[dict]:
        return [
            _summary(GameState.model_validate_json(raw))
            for raw in self._sessions.values()
        ]

    def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def clear(self) -> None:
        self._sessions.clear()
