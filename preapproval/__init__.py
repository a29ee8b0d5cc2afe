"""Mortgage pre-approval wizard."""

from preapproval.constants import WIZARD_COMPLETED, WIZARD_QUIT

__all__ = ["WIZARD_COMPLETED", "WIZARD_QUIT"]
