"""Command building domain exports."""

from .command_builder import build_command, redirect_input, requires_compilation, substitute_file
from .command_plans import BuildPlan, CompileStep, ImmediateCommand

__all__ = [
    "BuildPlan",
    "CompileStep",
    "ImmediateCommand",
    "build_command",
    "redirect_input",
    "requires_compilation",
    "substitute_file",
]
