"""
Side effects: running the mirroring programs and moving mirrors around.

None of these raise.  Failures are logged and reported as an `Outcome`,
since nobody is waiting on the other end to hear about them.
"""

import logging
import os
import shutil
import subprocess
from typing import Optional

from mirror_webhooks.types import Outcome

logger = logging.getLogger(__name__)


def run_command(cmd: str, *args: str, timeout: Optional[float] = None) -> Outcome:
    """
    Run an external program to completion.

    Its stdout and stderr are ours, so its output lands in the same log
    stream as this process.

    Arguments:
        cmd: the program to run.
        args: its arguments, passed as-is with no shell in between.
        timeout: seconds to wait before killing it, or None to wait forever.
    """
    logger.info(f"Running: {cmd} {list(args)}")
    try:
        subprocess.run([cmd, *args], check=True, timeout=timeout)
    except subprocess.CalledProcessError as exc:
        logger.error(f"ERROR running {cmd}: exit status {exc.returncode}")
        return Outcome.COMMAND_FAILED
    except subprocess.TimeoutExpired:
        logger.error(f"ERROR running {cmd}: killed after {timeout} seconds")
        return Outcome.COMMAND_FAILED
    except (OSError, ValueError) as exc:
        logger.error(f"ERROR running {cmd}: {exc}")
        return Outcome.COMMAND_FAILED
    return Outcome.OK


def remove_tree(path: str) -> Outcome:
    """Delete a mirror directory and everything in it.  A missing one is fine."""
    logger.info(f"Removing {path}")
    if not os.path.lexists(path):
        logger.info(f"{path} doesn't exist, nothing to remove")
        return Outcome.OK
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
    except (OSError, ValueError) as exc:
        logger.error(f"ERROR removing {path}: {exc}")
        return Outcome.COMMAND_FAILED
    return Outcome.OK


def move_tree(old_path: str, new_path: str) -> Outcome:
    """
    Move a mirror directory to a new name.

    Like mv, if `new_path` is an existing directory, the mirror ends up
    inside it.
    """
    logger.info(f"Moving {old_path} to {new_path}")
    try:
        shutil.move(old_path, new_path)
    except (OSError, ValueError) as exc:
        logger.error(f"ERROR moving {old_path} to {new_path}: {exc}")
        return Outcome.COMMAND_FAILED
    return Outcome.OK
