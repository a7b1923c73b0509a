"""skill-issue: static security analyzer for agent skill directories.

``DISTRIBUTION_NAME`` names the tool everywhere it identifies itself: the
installed version lookup, the HTTP ``User-Agent`` sent to GitHub, the SARIF
driver and the CLI program name.
"""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "skill-issue"

try:
    __version__ = version(DISTRIBUTION_NAME)
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["DISTRIBUTION_NAME", "__version__"]
