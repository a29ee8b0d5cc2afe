"""Per-step answer checks. Messages are shown to the user as-is."""

import re

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
from preapproval.errors import AnswerValidationError
from preapproval.steps import StepDef

_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_MIN_LOCATION_LEN = 3
_MIN_CODE_LEN = 4


def validate_answer(step: StepDef, answer: Answer | None) -> Answer:
    """Check answer against step and return it with surrounding whitespace stripped.

    Raises AnswerValidationError on the first failing field.
    """
    if answer is None or answer.kind != step.kind:
        raise AnswerValidationError(step.key, _missing_message(step))

    if isinstance(answer, ChoiceAnswer):
        if answer.value not in step.options:
            raise AnswerValidationError(step.key, "Please select one of the options")
        return answer

    if isinstance(answer, LocationAnswer):
        value = answer.value.strip()
        if not value:
            raise AnswerValidationError(step.key, "Please enter a city or zip code")
        if len(value) < _MIN_LOCATION_LEN:
            raise AnswerValidationError(step.key, "Please enter a valid city or zip code")
        return LocationAnswer(value=value)

    if isinstance(answer, NameAnswer):
        return _validate_name(answer)

    if isinstance(answer, EmailAnswer):
        email = answer.value.strip()
        if not email:
            raise AnswerValidationError("email", "Please enter your email address")
        if not _EMAIL_RE.match(email):
            raise AnswerValidationError("email", "Please enter a valid email address")
        return EmailAnswer(value=email)

    if isinstance(answer, CodeAnswer):
        code = answer.value.strip()
        if not code:
            raise AnswerValidationError("code", "Please enter the verification code")
        if len(code) < _MIN_CODE_LEN:
            raise AnswerValidationError("code", "Please enter a valid verification code")
        return CodeAnswer(value=code)

    # Sliders have no invalid position
    if isinstance(answer, (PriceRangeAnswer, DownPaymentAnswer)):
        return answer

    raise AnswerValidationError(step.key, _missing_message(step))


def _validate_name(answer: NameAnswer) -> NameAnswer:
    first = answer.first.strip()
    last = answer.last.strip()
    if not first:
        raise AnswerValidationError("firstName", "Please enter your first name")
    if not last:
        raise AnswerValidationError("lastName", "Please enter your last name")
    if not _NAME_RE.match(first):
        raise AnswerValidationError("firstName", "First name can only contain letters")
    if not _NAME_RE.match(last):
        raise AnswerValidationError("lastName", "Last name can only contain letters")
    return NameAnswer(first=first, last=last)


def _missing_message(step: StepDef) -> str:
    if step.kind == "choice":
        return "Please select one of the options"
    if step.kind == "location":
        return "Please enter a city or zip code"
    if step.kind == "name":
        return "Please enter your first name"
    if step.kind == "email":
        return "Please enter your email address"
    if step.kind == "code":
        return "Please enter the verification code"
    return "This step cannot be submitted"
