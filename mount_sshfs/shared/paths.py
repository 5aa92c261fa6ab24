"""Remote address parsing and path utilities for mount-sshfs."""
import posixpath

from .errors import InvalidRemoteFormatError
from .models import RemoteAddress


def normalize_remote_dir(path: str) -> str:
    """
    Normalize a remote directory by:
    - Resolving . and .. components
    - Removing duplicate and trailing slashes

    Relative paths stay relative, since sshfs resolves them against the
    remote user's home directory.

    Args:
        path: Remote directory to normalize

    Returns:
        Normalized path ("." for an empty path)
    """
    if not path:
        return "."
    normalized = posixpath.normpath(path)
    # normpath keeps exactly two leading slashes
    if normalized.startswith("/"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def join_remote(host_spec: str, directory: str) -> str:
    """
    Build a remote string from a ``[user@]host`` spec and a directory.

    Args:
        host_spec: Remote host, optionally prefixed with a user
        directory: Remote directory (normalized before joining)

    Returns:
        The ``host_spec:directory`` string
    """
    return f"{host_spec}:{normalize_remote_dir(directory)}"


def parse_remote(remote: str) -> RemoteAddress:
    """
    Split a ``user@host:dir`` string into its fields.

    The string must contain exactly one ``@``, and the part after it exactly
    one ``:``. No network or filesystem access happens here.

    Args:
        remote: Remote string to parse

    Returns:
        Parsed RemoteAddress

    Raises:
        InvalidRemoteFormatError: If the string has any other shape
    """
    user_fields = remote.split("@")
    if len(user_fields) != 2:
        raise InvalidRemoteFormatError(f"Invalid remote {remote!r}: expected exactly one '@'")

    # [host, dir, user, host:dir]
    fields = user_fields[1].split(":") + user_fields
    if len(fields) != 4:
        raise InvalidRemoteFormatError(
            f"Invalid remote {remote!r}: expected user@host:dir"
        )

    host, directory, user = fields[0], fields[1], fields[2]
    if not user or not host or not directory:
        raise InvalidRemoteFormatError(
            f"Invalid remote {remote!r}: user, host and directory must be non-empty"
        )

    return RemoteAddress(user=user, host=host, directory=normalize_remote_dir(directory))
