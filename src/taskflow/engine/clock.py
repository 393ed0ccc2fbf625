# src/taskflow/engine/clock.py

"""
Time and identity sources.

Every engine module reads the current moment through `now()` so tests can
freeze it (monkeypatch `taskflow.engine.clock.now`).
"""

import random
import string
from datetime import datetime, timezone

_BASE36 = string.digits + string.ascii_lowercase


def now() -> datetime:
    """Return the current moment as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out: list[str] = []
    while n:
        n, r = divmod(n, 36)
        out.append(_BASE36[r])
    return "".join(reversed(out))


def generate_id() -> str:
    """
    Return a probabilistically unique task id.

    Format: task_<epoch-millis>_<random-base36>, so ids sort roughly by
    creation time.
    """
    suffix = _base36(random.getrandbits(46)).rjust(9, "0")[-9:]
    return f"task_{epoch_millis(now())}_{suffix}"
