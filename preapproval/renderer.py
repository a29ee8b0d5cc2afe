"""Presentation of step changes as plain data.

The renderer never touches a UI. It describes what a view should do when the
visible step changes: which classes animate the outgoing and incoming step,
whether the progress strip shows, how far along each progress section is and
which location (?step=N) reflects the new position.
"""

from dataclasses import dataclass

from preapproval.constants import RESULTS_STEP

FORWARD = "forward"
BACKWARD = "backward"

RESULTS_QUERY = "results"

# (first step, last step) of each progress section, in display order
PROGRESS_SECTIONS: tuple[tuple[int, int], ...] = ((1, 2), (3, 8), (9, 14), (15, 17))


@dataclass(frozen=True)
class ProgressIndicator:
    """Position within the progress strip. section is -1 outside every section."""

    section: int
    percent: float
    completed: tuple[int, ...] = ()


@dataclass(frozen=True)
class StepTransition:
    """One step change. Animation classes are dropped after duration_ms; the
    current step keeps "active" and the previous step loses every class."""

    previous: int | None
    current: int
    direction: str
    exit_classes: tuple[str, ...]
    enter_classes: tuple[str, ...]
    duration_ms: int
    progress_visible: bool
    progress: ProgressIndicator
    query: str


def progress_for(index: int) -> ProgressIndicator:
    for section, (start, end) in enumerate(PROGRESS_SECTIONS):
        if start <= index <= end:
            percent = (index - start + 1) / (end - start + 1) * 100
            return ProgressIndicator(section, percent, tuple(range(section)))
    if index >= RESULTS_STEP:
        return ProgressIndicator(-1, 0.0, tuple(range(len(PROGRESS_SECTIONS))))
    return ProgressIndicator(-1, 0.0)


def step_query(index: int) -> str:
    """Location query for a step: empty on the first step, ?step=results at the end."""
    if index >= RESULTS_STEP:
        return f"?step={RESULTS_QUERY}"
    if index > 0:
        return f"?step={index}"
    return ""


def parse_step_query(value: str | None) -> int | None:
    """Step index from a ?step= value (or the bare value). None if absent or invalid."""
    if not value:
        return None
    raw = value.strip()
    if raw.startswith("?"):
        raw = raw[1:]
    if raw.startswith("step="):
        raw = raw[len("step="):]
    if raw == RESULTS_QUERY:
        return RESULTS_STEP
    try:
        index = int(raw)
    except ValueError:
        return None
    return min(max(index, 0), RESULTS_STEP)


class StepRenderer:
    """Computes StepTransition values with a fixed animation duration."""

    def __init__(self, duration_ms: int = 600) -> None:
        self.duration_ms = duration_ms

    def transition(
        self,
        previous: int | None,
        current: int,
        direction: str = FORWARD,
    ) -> StepTransition:
        forward = direction != BACKWARD
        exit_classes: tuple[str, ...] = ()
        if previous is not None and previous != current:
            exit_classes = ("slide-out-left",) if forward else ("slide-out-right",)
        enter_classes = (
            ("slide-in-right", "active") if forward else ("slide-in-left", "active")
        )
        return StepTransition(
            previous=previous,
            current=current,
            direction=FORWARD if forward else BACKWARD,
            exit_classes=exit_classes,
            enter_classes=enter_classes,
            duration_ms=self.duration_ms,
            progress_visible=0 < current < RESULTS_STEP,
            progress=progress_for(current),
            query=step_query(current),
        )
