"""Entry point: python -m preapproval [--step N|results]."""

import asyncio
import sys
from pathlib import Path

from core.logging_config import setup_logging
from core.settings import load_settings
from preapproval.constants import WIZARD_COMPLETED, WIZARD_QUIT
from preapproval.renderer import parse_step_query
from preapproval.wizard import run_wizard


def _query_step(argv: list[str]) -> int | None:
    """Step from --step N, --step=N or --step results."""
    for i, arg in enumerate(argv):
        if arg.startswith("--step="):
            return parse_step_query(arg.split("=", 1)[1])
        if arg == "--step" and i + 1 < len(argv):
            return parse_step_query(argv[i + 1])
    return None


def main() -> int:
    """Run the pre-approval wizard. Returns the process exit code."""
    project_root = Path(__file__).resolve().parent.parent
    setup_logging(project_root, load_settings(project_root / "config"))

    try:
        result = asyncio.run(
            run_wizard(project_root=project_root, query_step=_query_step(sys.argv[1:]))
        )
    except KeyboardInterrupt:
        print("\n\nPre-approval cancelled.")
        return WIZARD_QUIT

    if result.completed:
        return WIZARD_COMPLETED

    if result.location:
        print(f"\nProgress saved at {result.location}. Run again to continue.")
    else:
        print("\nPre-approval cancelled.")
    return WIZARD_QUIT


if __name__ == "__main__":
    sys.exit(main())
