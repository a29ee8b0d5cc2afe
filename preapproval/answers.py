"""Tagged answer variants captured per wizard step.

Each step stores exactly one answer; the `kind` field tells which variant it
is, so restoring a step never has to guess the shape from the value.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from preapproval.constants import PRICE_BAND


class _Answer(BaseModel):
    model_config = ConfigDict(frozen=True)


class ChoiceAnswer(_Answer):
    """One option picked from a card or button list."""

    kind: Literal["choice"] = "choice"
    value: str


class LocationAnswer(_Answer):
    kind: Literal["location"] = "location"
    value: str


class PriceRangeAnswer(_Answer):
    """Lower bound of the price band; the band spans PRICE_BAND above it."""

    kind: Literal["price_range"] = "price_range"
    minimum: int

    @property
    def maximum(self) -> int:
        return self.minimum + PRICE_BAND


class DownPaymentAnswer(_Answer):
    kind: Literal["down_payment"] = "down_payment"
    percent: int


class NameAnswer(_Answer):
    kind: Literal["name"] = "name"
    first: str
    last: str


class EmailAnswer(_Answer):
    kind: Literal["email"] = "email"
    value: str


class CodeAnswer(_Answer):
    kind: Literal["code"] = "code"
    value: str


Answer = Annotated[
    Union[
        ChoiceAnswer,
        LocationAnswer,
        PriceRangeAnswer,
        DownPaymentAnswer,
        NameAnswer,
        EmailAnswer,
        CodeAnswer,
    ],
    Field(discriminator="kind"),
]

_ANSWERS = TypeAdapter(list[Optional[Answer]])


def dump_answers(answers: list[Optional[Answer]]) -> str:
    """Serialize an answer list (with gaps as null) to JSON."""
    return _ANSWERS.dump_json(answers).decode("utf-8")


def load_answers(raw: str) -> list[Optional[Answer]]:
    """Parse an answer list from JSON. Raises pydantic.ValidationError on bad data."""
    return _ANSWERS.validate_json(raw)
