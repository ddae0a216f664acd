"""
Standard exit codes and error types for commitlog.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Iterable, Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Invalid configuration, pattern or revision expression
AMBIGUOUS_RANGE = 72     # Tag autodetection could not pick a range
RESOLUTION_ERROR = 73    # Revision does not resolve, or is not an ancestor
REPOSITORY_ERROR = 74    # Repository access failed
RENDER_ERROR = 75        # Link templates are malformed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': REPOSITORY_ERROR,
    'PermissionError': REPOSITORY_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Base error carrying the exit code the CLI should terminate with.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised for invalid patterns, revision expressions or config files."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class AmbiguousRangeError(CommandError):
    """Raised when tag autodetection cannot select exactly one range."""
    def __init__(self, message: str, candidates: Optional[Iterable[str]] = None):
        self.candidates = list(candidates or [])
        if self.candidates:
            listed = ", ".join(repr(c) for c in self.candidates)
            message = f"{message} (candidate prefixes: {listed})"
        super().__init__(message, AMBIGUOUS_RANGE)


class ResolutionError(CommandError):
    """Raised when a range endpoint is not a commit or not an ancestor."""
    def __init__(self, message: str):
        super().__init__(message, RESOLUTION_ERROR)


class RepositoryError(CommandError):
    """Raised when the repository cannot be read."""
    def __init__(self, message: str, path: Optional[str] = None):
        if path:
            message = f"{message}: {path}"
        super().__init__(message, REPOSITORY_ERROR)
        self.path = path


class RenderError(CommandError):
    """Raised when link templates cannot be formatted."""
    def __init__(self, message: str):
        super().__init__(message, RENDER_ERROR)
