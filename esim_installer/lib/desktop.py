from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..context import RunContext

logger = logging.getLogger(__name__)

MIME_TYPES = [
    "text/html",
    "text/xml",
    "application/xhtml+xml",
    "application/xml",
    "application/rss+xml",
    "application/rdf+xml",
    "image/gif",
    "image/jpeg",
    "image/png",
    "x-scheme-handler/http",
    "x-scheme-handler/https",
    "x-scheme-handler/ftp",
    "x-scheme-handler/chrome",
    "video/webm",
    "application/x-xpinstall",
]


def render_launcher(*, frontend_dir: Path, venv_dir: Path) -> str:
    return "\n".join(
        [
            "#!/bin/bash",
            f"cd {frontend_dir}",
            f"source {venv_dir}/bin/activate",
            "python3 Application.py",
            "",
        ]
    )


def render_desktop_entry(*, command: str, icon: Path, working_dir: Path) -> str:
    return "\n".join(
        [
            "[Desktop Entry]",
            "Version=1.0",
            "Name=eSim",
            "Comment=EDA Tool",
            "GenericName=eSim",
            "Keywords=eda-tools",
            f"Exec={command} %u",
            f"Path={working_dir}",
            "Terminal=true",
            "X-MultipleArgs=false",
            "Type=Application",
            f"Icon={icon}",
            "Categories=Development;",
            "MimeType=" + "".join(f"{m};" for m in MIME_TYPES),
            "StartupNotify=true",
            "",
        ]
    )


def mark_trusted(ctx: RunContext, desktop_file: Path) -> bool:
    """Flag a desktop launcher as trusted through gio.

    Returns False when gio is unavailable.
    """
    if shutil.which("gio", path=ctx.env.get("PATH")) is None:
        logger.warning("'gio' command not found. Desktop icon may need manual trust setting.")
        return False
    ctx.run(["gio", "set", desktop_file, "metadata::trusted", "true"])
    return True
