"""Command-line interface for PHP Switcher."""
