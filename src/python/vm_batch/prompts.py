"""Interactive input for overriding defaults and confirming the plan."""

from typing import Optional, Protocol

import click


class Prompter(Protocol):
    """Capability to ask the operator questions."""

    def confirm(self, text: str, default: bool = False) -> bool:
        ...

    def ask(self, text: str, default: Optional[str] = None) -> str:
        ...


class ClickPrompter:
    """Prompter reading from the terminal through click."""

    def confirm(self, text: str, default: bool = False) -> bool:
        return click.confirm(text, default=default)

    def ask(self, text: str, default: Optional[str] = None) -> str:
        # An empty answer returns the default (or "" when there is none)
        return click.prompt(
            text,
            default=default if default is not None else "",
            show_default=default is not None,
        )
