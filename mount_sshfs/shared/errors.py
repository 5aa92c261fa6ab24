"""Error codes and exceptions for mount-sshfs."""
from enum import Enum, auto


class ErrorCode(Enum):
    """Enumeration of all possible error codes in the application."""

    INVALID_REMOTE = auto()
    HOSTKEY_UNKNOWN = auto()
    HOSTKEY_CHANGED = auto()
    IDENTITY_UNREADABLE = auto()
    AUTH_FAILED = auto()
    NETWORK_UNREACHABLE = auto()
    REMOTE_DISCONNECT = auto()
    REMOTE_VERIFICATION_FAILED = auto()
    ROOT_MAPPING_UNACKNOWLEDGED = auto()
    INVALID_MOUNT_PATH = auto()
    CONFIG_PARSE_FAILED = auto()
    MOUNT_EXIT_NONZERO = auto()
    UNKNOWN_ERROR = auto()


class MountSshfsError(Exception):
    """Base exception for mount-sshfs errors."""

    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"

    def prefixed(self, prefix: str) -> "MountSshfsError":
        """Return a copy of this error whose message starts with *prefix*."""
        wrapped = self.__class__.__new__(self.__class__)
        MountSshfsError.__init__(wrapped, self.code, f"{prefix}: {self.message}")
        wrapped.__cause__ = self
        return wrapped


class InvalidRemoteFormatError(MountSshfsError):
    """Raised when a remote string is not of the form user@host:dir."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_REMOTE, message)


class HostTrustError(MountSshfsError):
    """Raised when the host key cannot be verified against known_hosts."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.HOSTKEY_UNKNOWN):
        super().__init__(code, message)


class IdentityError(MountSshfsError):
    """Raised when the private key cannot be read or parsed."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.IDENTITY_UNREADABLE, message)


class ConnectionError(MountSshfsError):
    """Raised when dialing or authenticating to the remote fails."""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(code, message)


class RemoteVerificationError(MountSshfsError):
    """Raised when the remote directory cannot be confirmed."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.REMOTE_VERIFICATION_FAILED, message)


class PrivilegeSafetyError(MountSshfsError):
    """Raised when root identity mapping is requested without -root."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.ROOT_MAPPING_UNACKNOWLEDGED, message)


class LocalPathError(MountSshfsError):
    """Raised when the local mount point cannot be used."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_MOUNT_PATH, message)


class ConfigurationParseError(MountSshfsError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.CONFIG_PARSE_FAILED, message)


class MountCommandError(MountSshfsError):
    """Raised when the executed mount command exits non-zero."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.MOUNT_EXIT_NONZERO, message)
