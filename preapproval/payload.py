"""Build the application body sent with the verification code."""

from typing import Any

from preapproval.answers import (
    ChoiceAnswer,
    CodeAnswer,
    DownPaymentAnswer,
    EmailAnswer,
    LocationAnswer,
    NameAnswer,
)
from preapproval.constants import (
    CODE_STEP,
    DEFAULT_DOWN_PAYMENT,
    DOWN_PAYMENT_STEP,
    EMAIL_STEP,
    LOCATION_STEP,
    NAME_STEP,
    PRICE_BAND,
)
from preapproval.state import WizardState
from preapproval.steps import STEPS


def down_payment_amount(price_min: int, percent: int) -> int:
    """Down payment in dollars, computed on the top of the price band."""
    return round((price_min + PRICE_BAND) * percent / 100)


def format_currency(amount: float) -> str:
    return f"${amount:,.0f}"


def collect_lead(state: WizardState) -> dict[str, Any]:
    """Application fields known from the answers, without code and token.

    Unanswered choice steps (including a skipped sell-home step) are sent as
    empty strings.
    """
    lead: dict[str, Any] = {}
    for step in STEPS:
        if step.kind == "choice":
            answer = state.answer_at(step.index)
            lead[step.key] = answer.value if isinstance(answer, ChoiceAnswer) else ""

    location = state.answer_at(LOCATION_STEP)
    lead["location"] = location.value if isinstance(location, LocationAnswer) else ""

    down = state.answer_at(DOWN_PAYMENT_STEP)
    percent = down.percent if isinstance(down, DownPaymentAnswer) else DEFAULT_DOWN_PAYMENT
    lead["priceRangeMin"] = state.slider_value
    lead["priceRangeMax"] = state.slider_value + PRICE_BAND
    lead["downPaymentPercentage"] = percent
    lead["downPaymentAmount"] = down_payment_amount(state.slider_value, percent)

    name = state.answer_at(NAME_STEP)
    lead["firstName"] = name.first if isinstance(name, NameAnswer) else ""
    lead["lastName"] = name.last if isinstance(name, NameAnswer) else ""

    email = state.answer_at(EMAIL_STEP)
    lead["email"] = email.value if isinstance(email, EmailAnswer) else ""
    return lead


def collect_application(state: WizardState, token: str | None) -> dict[str, Any]:
    """Full body for the confirm endpoint: lead fields plus code and token."""
    body = collect_lead(state)
    code = state.answer_at(CODE_STEP)
    body["code"] = code.value if isinstance(code, CodeAnswer) else ""
    body["token"] = token
    return body
