"""
Priority Module - Best-effort lower scheduling priority during solving.

Uses psutil to raise the process niceness (or drop to the below-normal
priority class on Windows) for the duration of a solving pass, and to
restore it afterwards. Unprivileged processes on POSIX systems usually
cannot lower their niceness again. The first failed restore is logged and
later passes leave the priority alone, so the process stays at the lowered
priority instead of stepping further down.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psutil

logger = logging.getLogger(__name__)

# Niceness used for solving passes on POSIX systems
SOLVING_NICENESS = 5

# Set once restoring the priority failed
_restore_failed = False


def _lower(proc: psutil.Process) -> int:
    """Lower the priority of a process and return the previous one."""
    previous = proc.nice()
    if psutil.WINDOWS:
        target = psutil.BELOW_NORMAL_PRIORITY_CLASS
        if previous in (psutil.IDLE_PRIORITY_CLASS, psutil.BELOW_NORMAL_PRIORITY_CLASS):
            return previous
    else:
        target = max(previous, SOLVING_NICENESS)
    if target != previous:
        proc.nice(target)
    return previous


def _restore(proc: psutil.Process, previous: int) -> None:
    global _restore_failed
    try:
        if proc.nice() != previous:
            proc.nice(previous)
    except (psutil.Error, OSError) as e:
        _restore_failed = True
        logger.info(f"Could not restore priority {previous}, "
                    f"keeping the lowered priority for this process: {e}")


def reset_restore_failure() -> None:
    """Allow lowering the priority again after a failed restore."""
    global _restore_failed
    _restore_failed = False


@contextmanager
def lowered_priority(enabled: bool = True,
                     proc: Optional[psutil.Process] = None) -> Iterator[None]:
    """
    Run the enclosed block with a lowered process priority.

    Args:
        enabled: If False, do nothing
        proc: Process to adjust, the current one if None

    Example:
        with lowered_priority():
            solver.solve(asker)
    """
    if not enabled or _restore_failed:
        yield
        return

    previous = None
    try:
        if proc is None:
            proc = psutil.Process()
        previous = _lower(proc)
    except (psutil.Error, OSError) as e:
        logger.debug(f"Could not lower priority: {e}")

    try:
        yield
    finally:
        if proc is not None and previous is not None:
            _restore(proc, previous)
