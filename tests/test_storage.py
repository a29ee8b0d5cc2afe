"""Tests for preapproval.storage."""

import json
from pathlib import Path

import pytest

from preapproval.answers import (
    ChoiceAnswer,
    DownPaymentAnswer,
    LocationAnswer,
    NameAnswer,
    PriceRangeAnswer,
)
from preapproval.client import PreApprovalOutcome, SubmissionResult
from preapproval.constants import ANSWERS_KEY, SLIDER_KEY, STEP_KEY
from preapproval.state import WizardState
from preapproval.storage import (
    JsonFileStore,
    MemoryStore,
    WizardPersistence,
    build_store,
)


class _BrokenStore:
    """Store whose every operation fails, like disabled browser storage."""

    def get(self, key: str) -> str | None:
        raise OSError("storage disabled")

    def set(self, key: str, value: str) -> None:
        raise OSError("storage disabled")

    def remove(self, key: str) -> None:
        raise OSError("storage disabled")


@pytest.mark.parametrize(
    "state",
    [
        WizardState(),
        WizardState(step_index=3, answers=[ChoiceAnswer(value="Townhouse")], slider_value=450000),
        WizardState(
            step_index=16,
            answers=[
                ChoiceAnswer(value="Condominium"),
                LocationAnswer(value="78701"),
                None,
                None,
                None,
                ChoiceAnswer(value="No, I don't own a home"),
                None,
                None,
                None,
                PriceRangeAnswer(minimum=520000),
                DownPaymentAnswer(percent=10),
                None,
                None,
                None,
                None,
                NameAnswer(first="Ana", last="O'Neil"),
            ],
            slider_value=520000,
        ),
    ],
)
def test_save_then_load_returns_equal_state(persistence, state: WizardState) -> None:
    """save() followed by load() reproduces the state."""
    persistence.save(state)
    assert persistence.load() == state


def test_load_defaults_when_empty(persistence) -> None:
    assert persistence.load() == WizardState(step_index=0, answers=[], slider_value=300000)


def test_save_writes_three_keys(persistence, store) -> None:
    persistence.save(WizardState(step_index=2, slider_value=310000))
    assert store.get(STEP_KEY) == "2"
    assert json.loads(store.get(ANSWERS_KEY)) == []
    assert store.get(SLIDER_KEY) == "310000"


def test_clear_twice_is_safe(persistence) -> None:
    """clear() is idempotent and load() then yields the default state."""
    persistence.save(WizardState(step_index=18))
    persistence.clear()
    persistence.clear()
    assert persistence.load() == WizardState()


def test_corrupt_values_fall_back_per_key(store, persistence) -> None:
    """Unparsable keys are ignored individually."""
    store.set(STEP_KEY, "seven")
    store.set(ANSWERS_KEY, '[{"kind": "teleport"}]')
    store.set(SLIDER_KEY, "425000")

    state = persistence.load()

    assert state.step_index == 0
    assert state.answers == []
    assert state.slider_value == 425000


def test_broken_store_never_raises() -> None:
    """Failing storage degrades to a fresh state."""
    persistence = WizardPersistence(_BrokenStore())
    persistence.save(WizardState(step_index=4))
    persistence.clear()
    assert persistence.load() == WizardState()
    assert persistence.load_result() is None


def test_result_round_trip(persistence) -> None:
    result = SubmissionResult(
        ok=True,
        success=True,
        message="ok",
        result=PreApprovalOutcome(status="APPROVED", max_purchase_price=400000),
    )
    persistence.save_result(result)
    assert persistence.load_result() == result

    persistence.clear_result()
    assert persistence.load_result() is None


def test_json_file_store_persists_across_instances(tmp_path: Path) -> None:
    """Values survive a new store instance; namespaces keep keys apart."""
    path = tmp_path / "data" / "state.json"
    JsonFileStore(path, "preapproval").set("a", "1")
    JsonFileStore(path, "other").set("a", "2")

    assert JsonFileStore(path, "preapproval").get("a") == "1"
    assert JsonFileStore(path, "other").get("a") == "2"
    assert json.loads(path.read_text())["preapproval:a"] == "1"

    JsonFileStore(path, "preapproval").remove("a")
    assert JsonFileStore(path, "preapproval").get("a") is None
    assert not path.with_name("state.json.tmp").exists()


def test_json_file_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json")
    assert JsonFileStore(path).get("a") is None


def test_build_store_from_settings(tmp_path: Path) -> None:
    assert isinstance(build_store(tmp_path, {"file": ""}), MemoryStore)
    store = build_store(tmp_path, {"file": "data/state.json", "namespace": "x"})
    assert isinstance(store, JsonFileStore)
    store.set("k", "v")
    assert (tmp_path / "data" / "state.json").exists()
