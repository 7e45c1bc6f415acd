"""Textual front end: modal prompts and the app that runs a workflow."""

from jirabranch.tui.app import JiraBranchApp, JiraBranchHost
from jirabranch.tui.prompt import InputPrompt
from jirabranch.tui.select import SelectDialog

__all__ = [
    "InputPrompt",
    "JiraBranchApp",
    "JiraBranchHost",
    "SelectDialog",
]
