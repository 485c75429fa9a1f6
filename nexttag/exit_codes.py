"""
Standard exit codes and error kinds for nexttag.

Following Unix/POSIX conventions for command-line tools. Every error the
resolution engine raises derives from NextTagError and carries the exit
code the CLI terminates with.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
UNKNOWN_BRANCH = 64      # Forced or active branch does not exist
API_ERROR = 65           # Hosting platform call failed
CONFIG_ERROR = 66        # Configuration file or option error
TAG_CONFLICT = 67        # Tag already exists
NETWORK_ERROR = 68       # Network connection failed or timed out
AUTH_ERROR = 69          # Authentication/authorization failed
DATA_ERROR = 70          # Version string failed to parse
NO_NEW_COMMITS = 71      # Branch head is already tagged
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for exceptions raised outside the engine
EXCEPTION_EXIT_CODES = {
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
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
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class NextTagError(CommandError):
    """Base class for every failure of a resolution run."""


class UnknownBranchError(NextTagError):
    """Raised when the forced or active branch cannot be found."""
    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__(message or f"unknown branch provided: {branch}", UNKNOWN_BRANCH)
        self.branch = branch


class NoNewCommitsError(NextTagError):
    """Raised when the branch head already carries the latest tag."""
    def __init__(self, tag_name: str, sha: str):
        super().__init__(
            f"no new commits since {tag_name} ({sha[:7]}), avoid tagging",
            NO_NEW_COMMITS,
        )
        self.tag_name = tag_name
        self.sha = sha


class TagConflictError(NextTagError):
    """Raised when a requested tag already exists."""
    def __init__(self, tag_name: str, message: Optional[str] = None):
        super().__init__(message or f"tag already exists {tag_name}", TAG_CONFLICT)
        self.tag_name = tag_name


class AlreadyExistsError(TagConflictError):
    """Raised by the remote when the tag reference is created twice."""
    def __init__(self, tag_name: str):
        super().__init__(tag_name, f"tag reference already exists refs/tags/{tag_name}")


class InvalidVersionError(NextTagError):
    """Raised when a version string fails to parse where parsing is required."""
    def __init__(self, version: str, reason: str = "not a semantic version"):
        super().__init__(f"invalid version {version!r}: {reason}", DATA_ERROR)
        self.version = version


class RemoteUnavailableError(NextTagError):
    """Raised when a hosting platform call fails at the transport level."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        exit_code = API_ERROR if status_code is not None else NETWORK_ERROR
        super().__init__(message, exit_code)
        self.status_code = status_code


class IssueNotFoundError(NextTagError):
    """Raised when a referenced issue does not exist."""
    def __init__(self, number: int):
        super().__init__(f"issue #{number} not found", API_ERROR)
        self.number = number


class AuthenticationError(NextTagError):
    """Raised when the access token is missing or rejected."""
    def __init__(self, message: str = "authentication with the hosting platform failed"):
        super().__init__(message, AUTH_ERROR)


class ConfigError(NextTagError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
