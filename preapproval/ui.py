"""Terminal view for the pre-approval wizard: styling and output."""

from typing import Callable

from questionary import Style

from preapproval.client import SubmissionResult
from preapproval.controller import Notice
from preapproval.payload import format_currency
from preapproval.renderer import PROGRESS_SECTIONS, StepTransition

STYLE = Style(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:green bold"),
        ("pointer", "fg:cyan bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:green"),
    ]
)

SECTION_TITLES = ("Property", "Timeline", "Details", "Wrap-up")

_BAR_WIDTH = 20


class TerminalView:
    """Prints step changes, notices and the final estimate.

    location mirrors the ?step= query of the visible step so the caller can
    tell the user where a later run resumes.
    """

    def __init__(self, out: Callable[[str], None] = print) -> None:
        self._out = out
        self.location = ""

    def on_transition(self, transition: StepTransition) -> None:
        self.location = transition.query
        if not transition.progress_visible:
            return
        progress = transition.progress
        parts = []
        for i, title in enumerate(SECTION_TITLES[: len(PROGRESS_SECTIONS)]):
            if i in progress.completed:
                parts.append(f"✓ {title}")
            elif i == progress.section:
                filled = round(_BAR_WIDTH * progress.percent / 100)
                bar = "█" * filled + "·" * (_BAR_WIDTH - filled)
                parts.append(f"▸ {title} [{bar}]")
            else:
                parts.append(f"  {title}")
        self._out("\n" + "   ".join(parts) + "\n")

    def on_notice(self, notice: Notice) -> None:
        symbol = "✗" if notice.level == "error" else "ℹ"
        self._out(f"  {symbol} {notice.message}")

    def show_result(self, result: SubmissionResult | None) -> None:
        if result is None:
            return
        outcome = result.result
        if result.message:
            self._out(f"\n{result.message}\n")
        if outcome is None:
            return
        approved = result.success and outcome.max_purchase_price is not None

        def amount(value: float | None) -> str:
            return format_currency(value) if approved and value is not None else "-"

        self._out(f"  Pre-approval status:     {outcome.status}")
        self._out(f"  Maximum purchase price:  {amount(outcome.max_purchase_price)}")
        self._out(f"  Loan amount:             {amount(outcome.loan_amount)}")
        rate = outcome.interest_rate if approved and outcome.interest_rate else "-"
        self._out(f"  Interest rate:           {rate}")

    def show_down_payment(self, percent: int, amount: int) -> None:
        self._out(f"  {format_currency(amount)} ({percent}% Down)")

    def show_price_range(self, price_min: int, price_max: int) -> None:
        self._out(f"  {format_currency(price_min)} - {format_currency(price_max)}")
