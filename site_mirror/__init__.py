"""
SiteMirror package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

from .cli import cli  # exported for tests and the console script

__all__ = ["cli", "__version__"]
