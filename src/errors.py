"""Dispatch failures and the exit status each one maps to."""


class DispatchError(Exception):
    """Base for every failure the dispatcher reports itself."""
    exit_code = 1


class ConfigurationError(DispatchError):
    """Invalid argument combination or unusable configuration."""


class PlatformUnsupported(DispatchError):
    """A requested feature is disabled on the current platform."""


class UnknownCommand(DispatchError):
    """No resolution was found for the command."""
    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(message)


class DeprecatedCommand(DispatchError):
    """A recognized but retired command name."""
    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(message)


class DelegatedFailure(DispatchError):
    """Raised when a delegated tool or backend could not be started."""
    def __init__(self, tool: str, exit_code: int = 1, output: str = ""):
        self.tool = tool
        self.exit_code = exit_code
        self.output = output
        message = f"failed to launch {tool}"
        if output:
            message = f"{message}: {output}"
        super().__init__(message)
