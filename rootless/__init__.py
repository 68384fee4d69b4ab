"""
Rootless Setup - Developer Tool Provisioning
Installs language runtimes, version managers, editors and database CLIs into the
user's home directory and keeps shell profile files in sync with them.
"""

__version__ = "0.4.0"
__author__ = "Rootless Setup Contributors"
__license__ = "MIT"

__all__ = ["__version__"]
