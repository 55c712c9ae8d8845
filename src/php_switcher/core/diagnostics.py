"""
Diagnostics: active version, registered versions and extension checks.
"""

import re
from typing import Dict, List, Optional, Tuple

from php_switcher.core import commands
from php_switcher.core.alternatives import AlternativesSwitcher
from php_switcher.core.runner import CommandRunner

# Extensions Laravel-class frameworks require, in display order
REQUIRED_EXTENSIONS = [
    "BCMath", "Ctype", "JSON", "Mbstring", "OpenSSL", "PDO", "Tokenizer", "XML",
    "CURL", "Fileinfo", "MySQL", "Zip", "GD", "Redis", "Memcached",
]

# No loaded module is literally called "mysql"
EXTENSION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "mysql": ("mysqli", "mysqlnd", "pdo_mysql"),
}

BANNER_PATTERN = re.compile(r"^PHP ([0-9]+)\.([0-9]+)")


class Diagnostics:
    """Read-only queries about the PHP installation."""

    def __init__(self, runner: CommandRunner, alternatives: AlternativesSwitcher):
        self.runner = runner
        self.alternatives = alternatives

    def version_banner(self) -> Optional[str]:
        """First ``PHP ...`` line of ``php -v``, or None if php is unavailable."""
        result = self.runner.run(commands.php_version_banner())
        if not result.ok:
            return None
        for line in result.stdout.splitlines():
            if line.startswith("PHP "):
                return line.strip()
        return None

    def current_version(self) -> Optional[str]:
        """Active CLI version as ``<major>.<minor>``."""
        banner = self.version_banner()
        if not banner:
            return None
        match = BANNER_PATTERN.match(banner)
        if not match:
            return None
        return f"{match.group(1)}.{match.group(2)}"

    def list_versions(self) -> List[str]:
        return self.alternatives.list_alternatives()

    def loaded_modules(self) -> List[str]:
        result = self.runner.run(commands.php_modules())
        if not result.ok:
            return []
        return [
            line.strip().lower()
            for line in result.stdout.splitlines()
            if line.strip() and not line.startswith("[")
        ]

    def check_required_extensions(self, extensions: Optional[List[str]] = None) -> Dict[str, bool]:
        """
        Report which required extensions are loaded.

        Args:
            extensions: Names to check, defaults to REQUIRED_EXTENSIONS

        Returns:
            Ordered mapping of extension name to presence
        """
        modules = set(self.loaded_modules())
        report = {}
        for name in extensions or REQUIRED_EXTENSIONS:
            key = name.lower()
            candidates = (key,) + EXTENSION_ALIASES.get(key, ())
            report[name] = any(candidate in modules for candidate in candidates)
        return report
