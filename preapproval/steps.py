"""Ordered catalogue of pre-approval wizard steps."""

from dataclasses import dataclass

from preapproval.constants import OWNS_HOME_ANSWER

_YES_NO = ("Yes", "No")


@dataclass(frozen=True)
class StepDef:
    """One screen of the wizard.

    kind is one of: choice, location, price_range, down_payment, name, email,
    code, results. key is the field name used in the submitted application.
    """

    index: int
    key: str
    kind: str
    prompt: str
    options: tuple[str, ...] = ()


STEPS: tuple[StepDef, ...] = (
    StepDef(
        0,
        "homeType",
        "choice",
        "What type of home are you looking for?",
        ("Single Family Home", "Townhouse", "Condominium", "Multi-Family Home"),
    ),
    StepDef(1, "location", "location", "Where are you looking to buy?"),
    StepDef(
        2,
        "propertyUsage",
        "choice",
        "How will you use this property?",
        ("Primary Residence", "Secondary Home", "Investment Property"),
    ),
    StepDef(
        3,
        "buyingTimeline",
        "choice",
        "When are you planning to buy?",
        ("0 - 3 months", "3 - 6 months", "6+ months", "Not sure yet"),
    ),
    StepDef(4, "workingWithAgent", "choice", "Are you working with an agent?", _YES_NO),
    StepDef(
        5,
        "currentlyOwnHome",
        "choice",
        "Do you currently own a home?",
        (OWNS_HOME_ANSWER, "No, I don't own a home"),
    ),
    StepDef(
        6,
        "planningToSellHome",
        "choice",
        "Do you plan to sell your current home?",
        _YES_NO,
    ),
    StepDef(7, "firstTimeBuyer", "choice", "Are you a first-time home buyer?", _YES_NO),
    StepDef(
        8,
        "militaryService",
        "choice",
        "Have you or your spouse served in the military?",
        _YES_NO,
    ),
    StepDef(9, "priceRange", "price_range", "What price range are you considering?"),
    StepDef(10, "downPayment", "down_payment", "How much do you plan to put down?"),
    StepDef(
        11,
        "employmentStatus",
        "choice",
        "What is your employment status?",
        ("Employed", "Self-Employed", "Retired", "Not Employed"),
    ),
    StepDef(
        12,
        "annualIncome",
        "choice",
        "What is your annual household income?",
        (
            "Less than $30,000",
            "$30,000 - $50,000",
            "$50,000 - $75,000",
            "$75,000 - $100,000",
            "Greater than $100,000",
        ),
    ),
    StepDef(
        13,
        "creditScore",
        "choice",
        "How would you rate your credit?",
        (
            "Excellent (720+)",
            "Good (680 to 719)",
            "Fair (620 to 679)",
            "Poor (619 and below)",
        ),
    ),
    StepDef(
        14,
        "bankruptcyForeclosure",
        "choice",
        "Any bankruptcy or foreclosure in the last 7 years?",
        _YES_NO,
    ),
    StepDef(15, "name", "name", "What is your name?"),
    StepDef(16, "email", "email", "Where should we send your verification code?"),
    StepDef(17, "code", "code", "Enter the verification code we emailed you"),
    StepDef(18, "results", "results", "Your pre-approval estimate"),
)


def get_step(index: int) -> StepDef:
    """Step definition for index. Raises IndexError when out of range."""
    if index < 0:
        raise IndexError(index)
    return STEPS[index]
