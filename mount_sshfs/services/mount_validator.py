"""Validation of mount options before a command is emitted."""
import logging
from pathlib import Path
from typing import Callable, Optional

from mount_sshfs.services.connection_checker import ConnectionChecker
from mount_sshfs.shared.errors import (
    LocalPathError,
    MountSshfsError,
    PrivilegeSafetyError,
    RemoteVerificationError,
)
from mount_sshfs.shared.models import MountOptions, SshSettings

logger = logging.getLogger(__name__)


def check_root_mapping(options: MountOptions) -> None:
    """
    Refuse to map onto uid/gid 0 unless root mapping was acknowledged.

    Raises:
        PrivilegeSafetyError: If uid or gid is 0 and is_root is false
    """
    if not options.is_root and options.maps_root:
        raise PrivilegeSafetyError("uid is 0 or gid is 0 and -root flag is not set")


def check_mount_path(mount_dir: str) -> None:
    """
    Check that *mount_dir* can be used as a mount point.

    An existing directory is accepted. A missing path is accepted if a
    zero-length file can be created there; the file is removed again.

    Raises:
        LocalPathError: If the path is empty, is an existing non-directory,
            or cannot be created
    """
    if not mount_dir:
        raise LocalPathError("invalid mount dir path: no path given")

    path = Path(mount_dir)
    if path.exists():
        if path.is_dir():
            return
        raise LocalPathError(f"invalid mount dir path: {mount_dir} is not a directory")

    try:
        path.touch(mode=0o644, exist_ok=False)
    except OSError as e:
        raise LocalPathError(f"invalid mount dir path: {mount_dir}: {e.strerror or e}")

    # remove the file created above
    try:
        path.unlink()
    except OSError as e:
        raise LocalPathError(
            f"invalid mount dir path: unable to remove {mount_dir}: {e.strerror or e}"
        )


def validate_options(
    options: MountOptions,
    settings: Optional[SshSettings] = None,
    checker_factory: Callable[..., ConnectionChecker] = ConnectionChecker,
) -> MountOptions:
    """
    Validate mount options.

    Checks run in a fixed order and stop at the first failure:
    root mapping, local mount path, then remote reachability.

    Args:
        options: Options to validate
        settings: Settings for the remote verification
        checker_factory: Builds the checker used for the remote step

    Returns:
        The same options, unchanged

    Raises:
        PrivilegeSafetyError: If root mapping is not acknowledged
        LocalPathError: If the mount path is unusable
        RemoteVerificationError: If the remote cannot be verified
    """
    check_root_mapping(options)
    check_mount_path(options.mount_dir)

    checker = checker_factory(options.remote, settings=settings)
    try:
        checker.verify()
    except MountSshfsError as e:
        raise RemoteVerificationError(f"Unable to verify remote: {e.message}") from e

    logger.debug(f"Options for {options.remote} -> {options.mount_dir} are valid")
    return options
