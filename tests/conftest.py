"""Shared fixtures: an in-memory store and a scripted verification backend."""

import asyncio
from typing import Any, Awaitable, Callable

import pytest

from core.settings import reload_settings
from preapproval.answers import (
    Answer,
    ChoiceAnswer,
    CodeAnswer,
    DownPaymentAnswer,
    EmailAnswer,
    LocationAnswer,
    NameAnswer,
    PriceRangeAnswer,
)
from preapproval.client import EmailVerification, PreApprovalOutcome, SubmissionResult
from preapproval.controller import WizardController
from preapproval.steps import StepDef
from preapproval.storage import MemoryStore, WizardPersistence


class FakeBackend:
    """Records calls and returns preset responses. Set gate to hold the email call."""

    def __init__(self) -> None:
        self.email_response = EmailVerification(ok=True, token="tok-1", message="sent")
        self.submit_response = SubmissionResult(
            ok=True,
            success=True,
            message="Pre-Approval Estimate Generated Successfully.",
            result=PreApprovalOutcome(
                status="APPROVED",
                max_purchase_price=452000,
                loan_amount=361600,
                interest_rate="6.50%",
            ),
        )
        self.email_calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self.submit_calls: list[dict[str, Any]] = []
        self.gate: asyncio.Event | None = None

    async def request_verification_code(
        self, email: str, name: str, lead: dict[str, Any] | None = None
    ) -> EmailVerification:
        self.email_calls.append((email, name, lead))
        if self.gate is not None:
            await self.gate.wait()
        return self.email_response

    async def confirm_verification_code(self, payload: dict[str, Any]) -> SubmissionResult:
        self.submit_calls.append(payload)
        return self.submit_response


def _answer_for(step: StepDef) -> Answer:
    """A valid answer for step. Choice steps pick the first option (owns a home)."""
    if step.kind == "choice":
        return ChoiceAnswer(value=step.options[0])
    if step.kind == "location":
        return LocationAnswer(value="Austin, TX")
    if step.kind == "price_range":
        return PriceRangeAnswer(minimum=300000)
    if step.kind == "down_payment":
        return DownPaymentAnswer(percent=20)
    if step.kind == "name":
        return NameAnswer(first="Jane", last="Doe")
    if step.kind == "email":
        return EmailAnswer(value="jane@example.com")
    if step.kind == "code":
        return CodeAnswer(value="123456")
    raise ValueError(step.kind)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Ensure clean settings cache for each test."""
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def persistence(store: MemoryStore) -> WizardPersistence:
    return WizardPersistence(store)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def controller(persistence: WizardPersistence, backend: FakeBackend) -> WizardController:
    ctrl = WizardController(persistence, backend)
    ctrl.start()
    return ctrl


@pytest.fixture
def answer_for() -> Callable[[StepDef], Answer]:
    return _answer_for


@pytest.fixture
def walk_to() -> Callable[[WizardController, int], Awaitable[None]]:
    """Advance a controller from its current step to index with valid answers."""

    async def _walk(ctrl: WizardController, index: int) -> None:
        while ctrl.step_index < index:
            assert await ctrl.go_forward(_answer_for(ctrl.current_step))

    return _walk
