"""Local persistence for wizard progress.

The wizard state is mirrored into a small string key-value store under three
independent keys, so a restart resumes where the user left off. Writes are not
atomic as a group; a torn write only costs a stale field on restore.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from preapproval.answers import dump_answers, load_answers
from preapproval.client import SubmissionResult
from preapproval.constants import (
    ANSWERS_KEY,
    RESULT_KEY,
    SLIDER_KEY,
    STEP_KEY,
)
from preapproval.state import WizardState

logger = logging.getLogger(__name__)

_TEMP_SUFFIX = ".tmp"


class KeyValueStore(Protocol):
    """Synchronous string store (browser localStorage semantics)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store. Used when no file is configured and in tests."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """JSON file-backed store. Atomic file writes via temp file + replace."""

    def __init__(self, path: Path, namespace: str = "") -> None:
        self._path = path
        self._temp_path = path.with_name(path.name + _TEMP_SUFFIX)
        self._namespace = (namespace or "").strip()

    def _ns(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Unreadable state file %s: %s", self._path, e)
            return {}

    def _save(self, store: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._temp_path.write_text(
            json.dumps(store, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        self._temp_path.replace(self._path)

    def get(self, key: str) -> str | None:
        value = self._load().get(self._ns(key))
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        store = self._load()
        store[self._ns(key)] = value
        self._save(store)

    def remove(self, key: str) -> None:
        store = self._load()
        if store.pop(self._ns(key), None) is not None:
            self._save(store)


class WizardPersistence:
    """Save, restore and clear WizardState in a KeyValueStore.

    Storage errors are logged and never raised: a failed read yields the
    default for that field, a failed write leaves the previous snapshot.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def save(self, state: WizardState) -> None:
        self._write(STEP_KEY, str(state.step_index))
        self._write(ANSWERS_KEY, dump_answers(state.answers))
        self._write(SLIDER_KEY, str(state.slider_value))

    def load(self) -> WizardState:
        state = WizardState()

        raw_step = self._read(STEP_KEY)
        if raw_step is not None:
            try:
                state.step_index = max(0, int(raw_step))
            except ValueError:
                logger.warning("Ignoring stored step %r", raw_step)

        raw_answers = self._read(ANSWERS_KEY)
        if raw_answers:
            try:
                state.answers = load_answers(raw_answers)
            except ValidationError as e:
                logger.warning("Ignoring stored answers: %s", e)

        raw_slider = self._read(SLIDER_KEY)
        if raw_slider is not None:
            try:
                state.slider_value = int(raw_slider)
            except ValueError:
                logger.warning("Ignoring stored slider value %r", raw_slider)

        return state

    def clear(self) -> None:
        for key in (STEP_KEY, ANSWERS_KEY, SLIDER_KEY):
            self._delete(key)

    def save_result(self, result: SubmissionResult) -> None:
        self._write(RESULT_KEY, result.model_dump_json())

    def load_result(self) -> SubmissionResult | None:
        raw = self._read(RESULT_KEY)
        if not raw:
            return None
        try:
            return SubmissionResult.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring stored result: %s", e)
            return None

    def clear_result(self) -> None:
        self._delete(RESULT_KEY)

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except Exception as e:
            logger.warning("State read failed for %s: %s", key, e)
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self._store.set(key, value)
        except Exception as e:
            logger.warning("State write failed for %s: %s", key, e)

    def _delete(self, key: str) -> None:
        try:
            self._store.remove(key)
        except Exception as e:
            logger.warning("State delete failed for %s: %s", key, e)


def build_store(project_root: Path, cfg: dict[str, Any]) -> KeyValueStore:
    """Store from settings["storage"]: a JSON file, or memory when file is empty."""
    rel = cfg.get("file")
    if not rel:
        return MemoryStore()
    return JsonFileStore(project_root / rel, cfg.get("namespace", ""))
