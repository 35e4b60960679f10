"""
Standard exit codes for codewall commands.

Following Unix/POSIX conventions for command-line tools.
"""
import sys
from typing import Optional

from .domain.failure import RemoteServiceError

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_CANDIDATE_FOUND = 64  # Attempt budget exhausted without a usable file
API_ERROR = 65           # GitHub API call or archive transfer failed
CONFIG_ERROR = 66        # Missing or invalid configuration
PERMISSION_ERROR = 67    # Insufficient permissions
AUTH_ERROR = 69          # GitHub rejected the access token
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'ExhaustedSearch': NO_CANDIDATE_FOUND,
    'RemoteServiceError': API_ERROR,
    'ConfigurationError': CONFIG_ERROR,
    'ScratchAreaError': GENERAL_ERROR,
    'ExternalToolError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
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
    if isinstance(exc, RemoteServiceError) and exc.status_code == 401:
        return AUTH_ERROR
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


def exit_with_code(code: int, message: Optional[str] = None):
    """
    Exit with a specific code and optional message.

    Args:
        code: Exit code
        message: Optional message to print to stderr
    """
    if message:
        print(message, file=sys.stderr)
    sys.exit(code)
