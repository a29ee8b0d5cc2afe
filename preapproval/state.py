"""Wizard state owned by the controller."""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from preapproval.answers import Answer
from preapproval.constants import DEFAULT_SLIDER_VALUE


@dataclass
class WizardState:
    """Mutable state collected while the user walks through the wizard."""

    step_index: int = 0
    answers: list[Optional[Answer]] = field(default_factory=list)
    slider_value: int = DEFAULT_SLIDER_VALUE

    def answer_at(self, index: int) -> Optional[Answer]:
        if 0 <= index < len(self.answers):
            return self.answers[index]
        return None

    def set_answer(self, index: int, answer: Optional[Answer]) -> None:
        """Store answer at index, padding skipped steps with None."""
        if len(self.answers) <= index:
            self.answers.extend([None] * (index + 1 - len(self.answers)))
        self.answers[index] = answer


class TransitionLock:
    """Held while a step transition animates; choice clicks are ignored meanwhile."""

    def __init__(
        self,
        duration: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._duration = duration
        self._clock = clock
        self._until = 0.0

    @property
    def locked(self) -> bool:
        return self._clock() < self._until

    def acquire(self) -> bool:
        """Take the lock for one transition. Returns False if it is already held."""
        if self.locked:
            return False
        self._until = self._clock() + self._duration
        return True

    def release(self) -> None:
        self._until = 0.0
