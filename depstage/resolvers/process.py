"""Process execution adapter.

Runs external commands and exposes their standard output as a lazy sequence
of lines. Standard error is inherited so it reaches the console directly and
never mixes with output that callers parse.
"""

import logging
import os
import platform
import subprocess
from pathlib import Path
from typing import IO, Callable, Iterable, Iterator, List, Optional, Union, cast

logger = logging.getLogger("depstage.process")

PathLike = Union[str, Path]


def on_windows() -> bool:
    """Check whether commands must go through the native Windows shell.

    Returns:
        bool: True on Windows unless running under a Cygwin shell.
    """
    ostype = os.environ.get("OSTYPE", "")
    is_cygwin = "cygwin" in ostype.lower()
    is_windows = "windows" in platform.system().lower()
    return is_windows and not is_cygwin


def build_command(command: Iterable[str]) -> List[str]:
    """Apply the platform shell prefix to a command."""
    args = [str(arg) for arg in command]
    if on_windows():
        return ["cmd", "/c"] + args
    return args


def run(*command: str, cwd: Optional[PathLike] = None) -> Iterator[str]:
    """Run a command and yield its output lines as they are produced.

    Nothing is spawned until the first line is requested. The sequence is
    finite and cannot be restarted.

    Args:
        *command: Program and arguments.
        cwd: Working directory (optional).

    Yields:
        str: Output lines without trailing newlines.

    Raises:
        subprocess.CalledProcessError: If the command exits non-zero
            (raised once output is exhausted).
        FileNotFoundError: If the executable does not exist.
    """
    args = build_command(command)
    logger.debug("Running command: %s (cwd=%s)", " ".join(args), cwd)

    with subprocess.Popen(
        args,
        cwd=str(cwd) if cwd is not None else None,
        stdout=subprocess.PIPE,
        text=True,
        bufsize=1,
    ) as proc:
        # stdout=PIPE guarantees a stream
        for line in cast(IO[str], proc.stdout):
            yield line.rstrip("\r\n")
        returncode = proc.wait()

    if returncode != 0:
        logger.error("Command failed with exit code %d: %s", returncode, " ".join(args))
        raise subprocess.CalledProcessError(returncode, args)


def _log_line(line: str) -> None:
    logger.info("%s", line)


def tee(lines: Iterable[str], sink: Optional[Callable[[str], None]] = None) -> None:
    """Drain output lines into a sink (console log by default).

    Args:
        lines: Lines to forward, typically from ``run``.
        sink: Callable receiving each line.
    """
    sink = sink or _log_line
    for line in lines:
        sink(line)


__all__ = ["build_command", "on_windows", "run", "tee"]
