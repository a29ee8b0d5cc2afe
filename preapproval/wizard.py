"""Pre-approval wizard orchestration for the terminal.

Binds WizardController to questionary prompts: one prompt per visible step,
"← Back" on choice lists and "<" in text fields to go back.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import questionary
from questionary import Choice

from core.settings import get_setting, load_settings
from preapproval.answers import (
    ChoiceAnswer,
    CodeAnswer,
    DownPaymentAnswer,
    EmailAnswer,
    LocationAnswer,
    NameAnswer,
)
from preapproval.client import VerificationClient
from preapproval.constants import DEFAULT_DOWN_PAYMENT, PRICE_BAND
from preapproval.controller import (
    START_RESULTS,
    START_RESUMABLE,
    Notice,
    VerificationBackend,
    WizardController,
)
from preapproval.payload import down_payment_amount
from preapproval.renderer import StepRenderer
from preapproval.state import TransitionLock
from preapproval.storage import WizardPersistence, build_store
from preapproval.ui import STYLE, TerminalView

_BACK = "__back__"
_BACK_KEYWORD = "<"

_TEXT_ANSWERS = {
    "location": LocationAnswer,
    "email": EmailAnswer,
    "code": CodeAnswer,
}


@dataclass
class WizardResult:
    """Result of running the wizard."""

    completed: bool
    location: str = ""  # ?step= query of the last visible step


async def run_wizard(
    project_root: Path | None = None,
    query_step: int | None = None,
    backend: VerificationBackend | None = None,
) -> WizardResult:
    """Run the wizard until the results step or until the user cancels.

    backend defaults to a VerificationClient built from settings["api"].
    """
    root = project_root or Path.cwd()
    settings = load_settings(root / "config")
    persistence = WizardPersistence(build_store(root, settings.get("storage", {})))

    animation_ms = int(get_setting(settings, "wizard.animation_ms", 600))
    select_delay_ms = int(get_setting(settings, "wizard.select_delay_ms", 300))

    client: VerificationClient | None = None
    if backend is None:
        client = VerificationClient(
            get_setting(settings, "api.base_url", "http://localhost:3000"),
            prefix=get_setting(settings, "api.prefix", "/public"),
            timeout=float(get_setting(settings, "api.timeout", 10.0)),
        )
        backend = client

    controller = WizardController(
        persistence,
        backend,
        renderer=StepRenderer(animation_ms),
        lock=TransitionLock((animation_ms + select_delay_ms) / 1000),
        price_min=int(get_setting(settings, "wizard.price_min", 100000)),
        price_max=int(get_setting(settings, "wizard.price_max", 2000000)),
    )
    view = TerminalView()
    controller.subscribe(view.on_transition, view.on_notice)
    try:
        completed = await _drive(controller, view, settings, query_step)
    finally:
        if client is not None:
            await client.aclose()
    return WizardResult(completed=completed, location=view.location)


async def _drive(
    controller: WizardController,
    view: TerminalView,
    settings: dict[str, Any],
    query_step: int | None = None,
) -> bool:
    """Prompt step by step. Returns True on reaching results, False if cancelled."""
    price_step = int(get_setting(settings, "wizard.price_step", 10000))

    outcome = controller.start(query_step)
    if outcome == START_RESULTS:
        view.show_result(controller.result)
        return True
    if outcome == START_RESUMABLE:
        resume = await questionary.select(
            "You have an unfinished pre-approval request.",
            choices=[
                Choice("Continue where I left off", True),
                Choice("Begin a new request", False),
            ],
            style=STYLE,
        ).ask_async()
        if resume is None:
            return False
        if resume:
            controller.resume()
        else:
            controller.restart()

    while not controller.completed:
        if not await _ask_step(controller, view, price_step):
            return False

    view.show_result(controller.result)
    return True


async def _ask_step(
    controller: WizardController,
    view: TerminalView,
    price_step: int,
) -> bool:
    """Prompt for the visible step and feed the answer to the controller.

    Returns False if the user cancelled.
    """
    step = controller.current_step
    saved = controller.current_answer

    if step.kind == "choice":
        choices = [Choice(option, option) for option in step.options]
        if controller.step_index > 0:
            choices.append(Choice("← Back", _BACK))
        value = await questionary.select(
            step.prompt,
            choices=choices,
            default=saved.value if isinstance(saved, ChoiceAnswer) else None,
            style=STYLE,
        ).ask_async()
        if value is None:
            return False
        if value == _BACK:
            controller.go_back()
        elif not controller.select_option(value):
            # Previous transition still animating; a deliberate pick still counts
            await controller.go_forward(ChoiceAnswer(value=value))
        return True

    if step.kind == "name":
        first_default = saved.first if isinstance(saved, NameAnswer) else ""
        first = await _ask_text(f"{step.prompt} First name:", first_default)
        if first is None:
            return False
        if first.strip() == _BACK_KEYWORD:
            controller.go_back()
            return True
        last_default = saved.last if isinstance(saved, NameAnswer) else ""
        last = await _ask_text("Last name:", last_default)
        if last is None:
            return False
        await controller.go_forward(NameAnswer(first=first, last=last))
        return True

    if step.kind == "price_range":
        raw = await _ask_text(
            f"{step.prompt} Lower bound in dollars:",
            str(controller.state.slider_value),
        )
        if raw is None:
            return False
        if raw.strip() == _BACK_KEYWORD:
            controller.go_back()
            return True
        value = _parse_int(raw)
        if value is None:
            view.on_notice(Notice("error", "Please enter a whole dollar amount"))
            return True
        price = controller.set_price(round(value / price_step) * price_step)
        view.show_price_range(price, price + PRICE_BAND)
        await controller.go_forward()
        return True

    if step.kind == "down_payment":
        percent_default = (
            saved.percent if isinstance(saved, DownPaymentAnswer) else DEFAULT_DOWN_PAYMENT
        )
        raw = await _ask_text(f"{step.prompt} Percent down:", str(percent_default))
        if raw is None:
            return False
        if raw.strip() == _BACK_KEYWORD:
            controller.go_back()
            return True
        value = _parse_int(raw.rstrip("%"))
        if value is None:
            view.on_notice(Notice("error", "Please enter a whole percentage"))
            return True
        percent = controller.set_down_payment(value)
        price_min = controller.state.slider_value
        view.show_down_payment(percent, down_payment_amount(price_min, percent))
        await controller.go_forward()
        return True

    answer_type = _TEXT_ANSWERS[step.kind]
    default = saved.value if isinstance(saved, answer_type) else ""
    raw = await _ask_text(step.prompt, default)
    if raw is None:
        return False
    if raw.strip() == _BACK_KEYWORD:
        controller.go_back()
        return True
    await controller.go_forward(answer_type(value=raw))
    return True


async def _ask_text(prompt: str, default: str = "") -> str | None:
    return await questionary.text(
        f"{prompt} ({_BACK_KEYWORD} to go back)",
        default=default,
        style=STYLE,
    ).ask_async()


def _parse_int(raw: str) -> int | None:
    cleaned = raw.strip().replace(",", "").replace("$", "")
    try:
        return int(cleaned)
    except ValueError:
        return None
