"""
PHP Switcher - install and switch PHP versions on Debian/Ubuntu hosts.

Keeps the CLI alternatives, PHP-FPM services and Apache configuration
pointing at one chosen PHP version.
"""

__version__ = "1.0.0"
__description__ = "PHP version switcher for Laravel on Debian/Ubuntu"

# Public API
from php_switcher.core.exceptions import PHPSwitcherError
from php_switcher.core.models import PhpVersion, SwitchResult, SwitchState

__all__ = [
    "__version__",
    "__description__",
    "PHPSwitcherError",
    "PhpVersion",
    "SwitchResult",
    "SwitchState",
]
