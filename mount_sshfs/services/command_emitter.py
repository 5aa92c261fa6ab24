"""Rendering and running the sshfs mount command."""
import logging
import shlex
import subprocess
from typing import List, Optional

from mount_sshfs.shared.errors import MountCommandError
from mount_sshfs.shared.models import MountOptions

logger = logging.getLogger(__name__)

MOUNT_HELPER = ["sudo", "sshfs"]
LINE_CONTINUATION = " \\\n\t"


def _segments(options: MountOptions) -> List[List[str]]:
    """Group the command arguments the way they are laid out on screen."""
    segments = [
        list(MOUNT_HELPER),
        ["-o", f"idmap=user,uid={options.uid},gid={options.gid}"],
    ]
    if options.is_for_docker:
        segments.append(["-o", "allow_other"])
    segments.append([options.remote])
    segments.append([options.mount_dir])
    return segments


def build_mount_args(options: MountOptions) -> List[str]:
    """Return the mount command as an argument vector."""
    return [arg for segment in _segments(options) for arg in segment]


def render_command(options: MountOptions) -> str:
    """
    Render the mount command as multi-line shell text.

    Each option group goes on its own tab-indented continuation line, and
    the remote and mount path are shell-quoted.
    """
    lines = [shlex.join(segment) for segment in _segments(options)]
    return LINE_CONTINUATION.join(lines) + "\n"


def run_mount(options: MountOptions, runner=subprocess.run) -> int:
    """
    Run the mount command instead of printing it.

    Returns:
        The process exit code (always 0)

    Raises:
        MountCommandError: If the command cannot be started or exits non-zero
    """
    cmd = build_mount_args(options)
    logger.info(f"sshfs: {shlex.join(cmd)}")
    try:
        completed = runner(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
    except OSError as e:
        raise MountCommandError(f"unable to run {cmd[0]}: {e}")

    rc = completed.returncode
    if rc != 0:
        output = completed.stdout.decode(errors="replace") if completed.stdout else ""
        raise MountCommandError(f"sshfs exit {rc}: {output.strip()[:500]}")
    return rc


def emit(options: MountOptions, stream) -> None:
    """Write the rendered command to *stream*."""
    stream.write(render_command(options))
    stream.flush()
