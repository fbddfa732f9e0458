"""Errors raised by the translator and the special action dispatcher."""


class ShellError(Exception):
    """Base class for errors reported to the user without ending the session."""

    pass


class CommandSyntaxError(ShellError, ValueError):
    """Raised when a backslash directive matches no known command."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"unknown command: {command}")


class MissingArgumentError(ShellError, ValueError):
    """Raised when a command is missing its required argument."""

    def __init__(self, usage: str):
        self.usage = usage
        super().__init__(f"usage: {usage}")


class UnknownActionError(ShellError, RuntimeError):
    """Raised when the dispatcher receives an action kind it cannot handle."""

    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"unknown special command: {kind}")
