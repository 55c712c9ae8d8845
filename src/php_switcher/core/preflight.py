"""
Preflight checks run before any subcommand.
"""

from php_switcher.core.exceptions import PrerequisiteError
from php_switcher.utils.config import Config
from php_switcher.utils.logging import get_logger
from php_switcher.utils.validators import find_missing_tools, has_root_privileges

logger = get_logger(__name__)


class PreflightChecker:
    """Fail fast when host tools or privileges are missing."""

    def __init__(self, config: Config):
        self.required_tools = list(config.required_tools)

    def run(self) -> None:
        """
        Verify required tools and root privileges.

        Raises:
            PrerequisiteError: If a tool is missing or the process is not root
        """
        missing = find_missing_tools(self.required_tools)
        for tool in missing:
            logger.error(f"{tool} not found. Please install it or ensure it's in your PATH.")
        if missing:
            raise PrerequisiteError(
                f"Missing required tools: {', '.join(missing)}",
                details={"missing": missing},
            )

        if not has_root_privileges():
            raise PrerequisiteError("Please run this tool as root or via sudo.")
