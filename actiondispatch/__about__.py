"""Contains metadata about the package, including version information and author details."""

__version__ = "actiondispatch@0.1.0"
