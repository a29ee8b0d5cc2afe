"""Wizard step controller.

Owns the WizardState: validates and captures answers, moves the step index
forward and back (skipping the sell-home step for non-owners), gates the last
two steps on the verification backend and mirrors every change into
persistence. Views subscribe to transitions and notices; the controller never
touches a UI.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar

from preapproval.answers import (
    Answer,
    ChoiceAnswer,
    CodeAnswer,
    DownPaymentAnswer,
    EmailAnswer,
    NameAnswer,
    PriceRangeAnswer,
)
from preapproval.client import NETWORK_ERROR, EmailVerification, SubmissionResult
from preapproval.constants import (
    CODE_STEP,
    DEFAULT_DOWN_PAYMENT,
    DOWN_PAYMENT_STEP,
    EMAIL_STEP,
    NAME_STEP,
    OWN_HOME_STEP,
    OWNS_HOME_ANSWER,
    PRICE_STEP,
    RESULTS_STEP,
    SELL_HOME_STEP,
)
from preapproval.errors import AnswerValidationError
from preapproval.payload import collect_application, collect_lead
from preapproval.renderer import BACKWARD, FORWARD, StepRenderer, StepTransition
from preapproval.state import TransitionLock, WizardState
from preapproval.steps import StepDef, get_step
from preapproval.storage import WizardPersistence
from preapproval.validation import validate_answer

logger = logging.getLogger(__name__)

T = TypeVar("T")

SESSION_EXPIRED = "Your session has expired. Please submit a new request."

# start() outcomes
START_FRESH = "fresh"
START_RESUMABLE = "resumable"
START_RESULTS = "results"


@dataclass(frozen=True)
class Notice:
    """Transient message for the user (toast). level is info or error."""

    level: str
    message: str


class VerificationBackend(Protocol):
    """The two calls that gate the email and code steps."""

    async def request_verification_code(
        self, email: str, name: str, lead: dict[str, Any] | None = None
    ) -> EmailVerification: ...

    async def confirm_verification_code(
        self, payload: dict[str, Any]
    ) -> SubmissionResult: ...


class WizardController:
    """Navigation and answer capture for the pre-approval wizard."""

    def __init__(
        self,
        persistence: WizardPersistence,
        backend: VerificationBackend,
        *,
        renderer: StepRenderer | None = None,
        lock: TransitionLock | None = None,
        price_min: int = 100000,
        price_max: int = 2000000,
    ) -> None:
        self._persistence = persistence
        self._backend = backend
        self._renderer = renderer or StepRenderer()
        self._lock = lock or TransitionLock(0.9)
        self._price_min = price_min
        self._price_max = price_max

        self.state = WizardState()
        self.result: SubmissionResult | None = None
        self.last_notice: Notice | None = None
        self.last_transition: StepTransition | None = None

        self._transition_listeners: list[Callable[[StepTransition], None]] = []
        self._notice_listeners: list[Callable[[Notice], None]] = []
        self._token: str | None = None
        self._epoch = 0
        self._inflight: asyncio.Future[Any] | None = None

    # --- Observation ---

    def subscribe(
        self,
        on_transition: Callable[[StepTransition], None] | None = None,
        on_notice: Callable[[Notice], None] | None = None,
    ) -> None:
        if on_transition is not None:
            self._transition_listeners.append(on_transition)
        if on_notice is not None:
            self._notice_listeners.append(on_notice)

    @property
    def step_index(self) -> int:
        return self.state.step_index

    @property
    def current_step(self) -> StepDef:
        return get_step(self.state.step_index)

    @property
    def current_answer(self) -> Optional[Answer]:
        """Saved answer for the visible step, used to refill its inputs."""
        return self.state.answer_at(self.state.step_index)

    @property
    def busy(self) -> bool:
        """True while a verification request is outstanding."""
        return self._inflight is not None and not self._inflight.done()

    @property
    def completed(self) -> bool:
        return self.state.step_index >= RESULTS_STEP

    # --- Session lifecycle ---

    def start(self, query_step: int | None = None) -> str:
        """Restore saved progress and decide what to show first.

        Returns START_RESULTS when the flow is already complete (query at
        results or saved index at/after results): the last stored outcome is
        loaded and saved progress is cleared. Returns START_RESUMABLE when
        saved progress exists; the view offers resume() or restart(). Otherwise
        shows the first step and returns START_FRESH. Numeric query steps do
        not override saved progress.
        """
        self.state = self._persistence.load()

        if query_step == RESULTS_STEP or self.state.step_index >= RESULTS_STEP:
            self.state.step_index = RESULTS_STEP
            self.result = self._persistence.load_result()
            self._persistence.clear()
            self._show(None, RESULTS_STEP, FORWARD)
            if self.result is None:
                self._notify("info", SESSION_EXPIRED)
            return START_RESULTS

        if self.state.step_index > 0:
            return START_RESUMABLE

        self._show(None, 0, FORWARD)
        return START_FRESH

    def resume(self) -> int:
        """Continue the saved session. Returns the step actually shown."""
        return self.jump_to(self.state.step_index)

    def restart(self) -> None:
        """Begin a new request: drop saved progress and the last outcome."""
        self._invalidate_inflight()
        self._persistence.clear()
        self._persistence.clear_result()
        self.state = WizardState()
        self.result = None
        self._token = None
        self._show(None, 0, FORWARD)

    # --- Navigation ---

    def jump_to(self, index: int) -> int:
        """Show step index directly. Returns the step actually shown.

        The target is clamped to the code step; the code step itself maps back
        to the email step because no code expiry is tracked and the old code is
        presumed stale. The sell-home skip applies as for forward moves.
        """
        self._invalidate_inflight()
        target = min(max(index, 0), CODE_STEP)
        if target == CODE_STEP:
            target = EMAIL_STEP
        target = self._skip_forward(target)
        self.state.step_index = target
        self._persistence.save(self.state)
        self._show(None, target, FORWARD)
        return target

    def go_back(self) -> bool:
        """Move one step back. Not available on the first or results step."""
        index = self.state.step_index
        if index <= 0 or index >= RESULTS_STEP:
            return False
        self._invalidate_inflight()
        target = self._skip_backward(index - 1)
        self.state.step_index = target
        self._persistence.save(self.state)
        self._show(index, target, BACKWARD)
        return True

    async def go_forward(self, answer: Answer | None = None) -> bool:
        """Validate and capture answer for the current step, then advance.

        answer defaults to the saved answer for the step (or the slider value
        on slider steps). Returns False without changing the step when the
        answer is invalid, a request is outstanding or the backend refuses.
        """
        index = self.state.step_index
        if index >= RESULTS_STEP:
            return False
        if self.busy:
            logger.debug("Ignoring advance while a verification request is pending")
            return False

        step = get_step(index)
        if answer is None:
            answer = self.current_answer or self._slider_answer(step)
        try:
            answer = validate_answer(step, answer)
        except AnswerValidationError as e:
            self._notify("error", e.message)
            return False

        if isinstance(answer, EmailAnswer):
            return await self._submit_email(answer)
        if isinstance(answer, CodeAnswer):
            return await self._submit_code(answer)

        self.state.set_answer(index, answer)
        self._advance(index)
        return True

    def select_option(self, value: str) -> bool:
        """Pick a choice card and advance. Ignored while a transition animates."""
        step = self.current_step
        if step.kind != "choice" or not self._lock.acquire():
            return False
        try:
            answer = validate_answer(step, ChoiceAnswer(value=value))
        except AnswerValidationError as e:
            self._lock.release()
            self._notify("error", e.message)
            return False
        self.state.set_answer(step.index, answer)
        self._advance(step.index)
        return True

    # --- Sliders (written on every input event, no validate-on-advance) ---

    def set_price(self, value: int) -> int:
        price = min(max(int(value), self._price_min), self._price_max)
        self.state.slider_value = price
        self.state.set_answer(PRICE_STEP, PriceRangeAnswer(minimum=price))
        self._persistence.save(self.state)
        return price

    def set_down_payment(self, percent: int) -> int:
        pct = min(max(int(percent), 0), 100)
        self.state.set_answer(DOWN_PAYMENT_STEP, DownPaymentAnswer(percent=pct))
        self._persistence.save(self.state)
        return pct

    # --- Internals ---

    def _owns_home(self) -> bool:
        answer = self.state.answer_at(OWN_HOME_STEP)
        return isinstance(answer, ChoiceAnswer) and answer.value == OWNS_HOME_ANSWER

    def _skip_forward(self, index: int) -> int:
        if index == SELL_HOME_STEP and not self._owns_home():
            return index + 1
        return index

    def _skip_backward(self, index: int) -> int:
        if index == SELL_HOME_STEP and not self._owns_home():
            return index - 1
        return index

    def _slider_answer(self, step: StepDef) -> Optional[Answer]:
        if step.kind == "price_range":
            return PriceRangeAnswer(minimum=self.state.slider_value)
        if step.kind == "down_payment":
            return DownPaymentAnswer(percent=DEFAULT_DOWN_PAYMENT)
        return None

    def _advance(self, index: int) -> None:
        target = self._skip_forward(index + 1)
        self.state.step_index = target
        self._persistence.save(self.state)
        self._show(index, target, FORWARD)

    async def _submit_email(self, answer: EmailAnswer) -> bool:
        self.state.set_answer(EMAIL_STEP, answer)
        self._persistence.save(self.state)
        name = self.state.answer_at(NAME_STEP)
        first = name.first if isinstance(name, NameAnswer) else ""

        response = await self._gated(
            self._backend.request_verification_code(
                answer.value, first, collect_lead(self.state)
            )
        )
        if response is None:
            return False
        if not response.ok:
            self._notify("error", response.message)
            return False

        self._token = response.token
        self._advance(EMAIL_STEP)
        return True

    async def _submit_code(self, answer: CodeAnswer) -> bool:
        self.state.set_answer(CODE_STEP, answer)
        self._persistence.save(self.state)

        result = await self._gated(
            self._backend.confirm_verification_code(
                collect_application(self.state, self._token)
            )
        )
        if result is None:
            return False
        if not result.ok:
            self._notify("error", result.message)
            return False

        self.result = result
        self._token = None
        self._persistence.save_result(result)
        self.state.step_index = RESULTS_STEP
        self._persistence.clear()
        self._show(CODE_STEP, RESULTS_STEP, FORWARD)
        return True

    async def _gated(self, call: Awaitable[T]) -> T | None:
        """Await a backend call tied to the current navigation epoch.

        Navigation cancels the call; its outcome is then discarded and None is
        returned. A call that raises is logged, reported as an error notice
        and also yields None.
        """
        epoch = self._epoch
        task = asyncio.ensure_future(call)
        self._inflight = task
        try:
            outcome = await task
        except asyncio.CancelledError:
            if epoch == self._epoch:
                raise
            logger.info("Verification request cancelled by navigation")
            return None
        except Exception as e:
            logger.warning("Verification request failed: %s", e)
            if epoch == self._epoch:
                self._notify("error", NETWORK_ERROR)
            return None
        finally:
            if self._inflight is task:
                self._inflight = None
        if epoch != self._epoch:
            logger.info("Discarding verification response after navigation")
            return None
        return outcome

    def _invalidate_inflight(self) -> None:
        self._epoch += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _show(self, previous: int | None, current: int, direction: str) -> None:
        transition = self._renderer.transition(previous, current, direction)
        self.last_transition = transition
        for listener in self._transition_listeners:
            listener(transition)

    def _notify(self, level: str, message: str) -> None:
        notice = Notice(level, message)
        self.last_notice = notice
        logger.info("Notice [%s]: %s", level, message)
        for listener in self._notice_listeners:
            listener(notice)
