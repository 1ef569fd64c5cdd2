from __future__ import annotations

import platform
from datetime import datetime, timezone


def system_probe() -> str:
    """
    Returns a string summarising host platform and time.
    """
    system = platform.system()
    release = platform.release()
    machine = platform.machine()
    timestamp = datetime.now(timezone.utc).isoformat()
    return f"{system} {release} ({machine}) @ {timestamp}"
