"""Tests for preapproval.wizard with scripted questionary prompts."""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import questionary

from preapproval.client import PreApprovalOutcome, SubmissionResult
from preapproval.state import WizardState
from preapproval.storage import JsonFileStore, WizardPersistence
from preapproval.wizard import run_wizard


def _prompt(value: Any) -> MagicMock:
    prompt = MagicMock()
    prompt.ask_async = AsyncMock(return_value=value)
    return prompt


def _persistence(root: Path) -> WizardPersistence:
    return WizardPersistence(JsonFileStore(root / "data" / "preapproval" / "state.json", "preapproval"))


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PREAPPROVAL_API_URL", raising=False)


@pytest.mark.asyncio
async def test_cancel_at_first_prompt(tmp_path: Path, backend, monkeypatch) -> None:
    monkeypatch.setattr(questionary, "select", MagicMock(return_value=_prompt(None)))

    result = await run_wizard(tmp_path, backend=backend)

    assert result.completed is False
    assert result.location == ""


@pytest.mark.asyncio
async def test_resume_from_code_step_restarts_at_email(tmp_path: Path, backend, monkeypatch) -> None:
    """A saved code step resumes on the email step."""
    _persistence(tmp_path).save(WizardState(step_index=17))
    monkeypatch.setattr(questionary, "select", MagicMock(return_value=_prompt(True)))
    text = MagicMock(return_value=_prompt(None))
    monkeypatch.setattr(questionary, "text", text)

    result = await run_wizard(tmp_path, backend=backend)

    assert result.completed is False
    assert result.location == "?step=16"
    assert text.call_count == 1


@pytest.mark.asyncio
async def test_results_start_shows_stored_outcome(tmp_path: Path, backend, monkeypatch) -> None:
    persistence = _persistence(tmp_path)
    persistence.save(WizardState(step_index=18))
    persistence.save_result(
        SubmissionResult(ok=True, success=True, result=PreApprovalOutcome(status="APPROVED"))
    )
    select = MagicMock()
    monkeypatch.setattr(questionary, "select", select)

    result = await run_wizard(tmp_path, backend=backend)

    assert result.completed is True
    assert result.location == "?step=results"
    select.assert_not_called()
    assert _persistence(tmp_path).load() == WizardState()


@pytest.mark.asyncio
async def test_full_run_submits_application(tmp_path: Path, backend, monkeypatch) -> None:
    """Walking every prompt reaches results and stores the outcome."""

    def fake_select(message: str, choices: list, **kwargs: Any) -> MagicMock:
        # Last option on the ownership question is "No"; first option elsewhere
        values = [c.value for c in choices if c.value != "__back__"]
        if "own a home" in message.lower():
            return _prompt(values[-1])
        return _prompt(values[0])

    answers = iter(["Austin, TX", "352,000", "10", "Jane", "Doe", "jane@example.com", "123456"])
    monkeypatch.setattr(questionary, "select", fake_select)
    monkeypatch.setattr(questionary, "text", lambda *a, **kw: _prompt(next(answers)))

    result = await run_wizard(tmp_path, backend=backend)

    assert result.completed is True
    assert result.location == "?step=results"
    assert backend.email_calls[0][:2] == ("jane@example.com", "Jane")
    payload = backend.submit_calls[0]
    assert payload["priceRangeMin"] == 350000
    assert payload["downPaymentPercentage"] == 10
    assert payload["planningToSellHome"] == ""
    assert payload["code"] == "123456"
    assert payload["token"] == "tok-1"
    assert _persistence(tmp_path).load_result() == backend.submit_response
