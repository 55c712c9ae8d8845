"""
CLI helper functions and utilities.
"""

from .display import show_extension_report, show_install_report, show_versions
from .errors import handle_errors

__all__ = [
    'show_extension_report',
    'show_install_report',
    'show_versions',
    'handle_errors'
]
