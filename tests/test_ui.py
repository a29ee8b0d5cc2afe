"""Tests for preapproval.ui."""

from preapproval.client import PreApprovalOutcome, SubmissionResult
from preapproval.controller import Notice
from preapproval.renderer import StepRenderer
from preapproval.ui import TerminalView


def test_output_goes_through_injected_writer() -> None:
    lines: list[str] = []
    view = TerminalView(out=lines.append)

    view.on_transition(StepRenderer().transition(3, 4))
    view.on_notice(Notice("error", "Please enter a valid email address"))

    assert view.location == "?step=4"
    assert "✓ Property" in lines[0]
    assert "▸ Timeline" in lines[0]
    assert lines[1] == "  ✗ Please enter a valid email address"


def test_declined_result_hides_amounts() -> None:
    lines: list[str] = []
    result = SubmissionResult(
        ok=True,
        success=False,
        message="Your application requires a manual review.",
        result=PreApprovalOutcome(status="DECLINED", reason="DTI too high"),
    )

    TerminalView(out=lines.append).show_result(result)

    assert any("DECLINED" in line for line in lines)
    assert any(line.strip() == "Loan amount:             -" for line in lines)
