"""Application-level exception types.

Convention:
- ``ConfigError`` for a site configuration file that cannot be read or has the
  wrong shape. The CLI reports it and exits with status 2.
- ``ValueError`` for invalid arguments handed to the library (for example a
  render context with both a page and a section bound).
"""

from __future__ import annotations


class ConfigError(ValueError):
    """Raised when the site configuration file is unreadable or malformed."""
