"""Best-effort probing of the host environment."""

import re
from pathlib import Path

OS_RELEASE_PATH = Path("/etc/os-release")
UNKNOWN_DISTRO = "(unknown)"

_DISTRO_ID_PATTERN = re.compile(r"^ID=(.*)$", re.MULTILINE)


def get_linux_distro(os_release: Path = OS_RELEASE_PATH) -> str:
    """Get the distribution id (e.g. ``ubuntu``) from an os-release file.

    Never fails: returns ``(unknown)`` if the file can't be read or has no ``ID=``.
    """
    try:
        content = os_release.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return UNKNOWN_DISTRO
    match = _DISTRO_ID_PATTERN.search(content)
    return match.group(1) if match else UNKNOWN_DISTRO
