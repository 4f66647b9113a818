"""
Version and build information, plus the startup banner.
"""
from __future__ import annotations

import platform
import sys

from utils import env_str

__version__ = "1.0.0"

BUILD_DATE = env_str("GRID_EXPORTER_BUILD_DATE", "unknown")
COMMIT = env_str("GRID_EXPORTER_COMMIT", "unknown")

LOGO = r"""
            _     _                                  _
  __ _ _ __(_) __| |       _____  ___ __   ___  _ __| |_ ___ _ __
 / _' | '__| |/ _  |_____ / _ \ \/ / '_ \ / _ \| '__| __/ _ \ '__|
| (_| | |  | | (_| |_____|  __/>  <| |_) | (_) | |  | ||  __/ |
 \__, |_|  |_|\__,_|      \___/_/\_\ .__/ \___/|_|   \__\___|_|
 |___/                             |_|
"""


def version_info() -> dict[str, str]:
    return {
        "version": __version__,
        "build_date": BUILD_DATE,
        "commit": COMMIT,
        "python": platform.python_version(),
        "os": sys.platform,
        "arch": platform.machine(),
    }


def banner() -> str:
    """Startup text: logo followed by version, build and platform details."""
    info = version_info()
    lines = [
        LOGO,
        f"Version: {info['version']}",
        f"Built on: {info['build_date']}",
        f"Commit: {info['commit']}",
        f"Python version: {info['python']}",
        f"OS: {info['os']}",
        f"Arch: {info['arch']}",
        "",
    ]
    return "\n".join(lines)
