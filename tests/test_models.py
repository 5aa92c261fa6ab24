"""Tests for data models and error types."""
from pathlib import Path

import pytest

from mount_sshfs.shared.errors import (
    ErrorCode,
    HostTrustError,
    MountSshfsError,
    RemoteVerificationError,
)
from mount_sshfs.shared.models import MountOptions, SshSettings


def test_mount_options_are_frozen():
    options = MountOptions(
        uid=1000, gid=1000, is_root=False, is_for_docker=False,
        mount_dir="/mnt/data", remote="alice@example.com:/data",
    )
    with pytest.raises(AttributeError):
        options.uid = 0


@pytest.mark.parametrize("uid,gid,expected", [
    (0, 0, True),
    (0, 1000, True),
    (1000, 0, True),
    (1000, 1000, False),
])
def test_maps_root(uid, gid, expected):
    options = MountOptions(
        uid=uid, gid=gid, is_root=False, is_for_docker=False,
        mount_dir="/mnt", remote="a@b:/c",
    )
    assert options.maps_root is expected


def test_ssh_settings_default_paths(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    settings = SshSettings()
    assert settings.port == 22
    assert settings.debug is False
    assert settings.resolved_identity_path() == tmp_path / ".ssh" / "id_rsa"
    assert settings.resolved_known_hosts_path() == tmp_path / ".ssh" / "known_hosts"


def test_ssh_settings_explicit_paths(tmp_path):
    settings = SshSettings(
        identity_path=tmp_path / "key", known_hosts_path=tmp_path / "hosts"
    )
    assert settings.resolved_identity_path() == tmp_path / "key"
    assert settings.resolved_known_hosts_path() == tmp_path / "hosts"


@pytest.mark.parametrize("port", [0, -1, 65536])
def test_ssh_settings_rejects_invalid_port(port):
    with pytest.raises(ValueError):
        SshSettings(port=port)


class TestErrors:
    """Tests for the error hierarchy."""

    def test_str_includes_code(self):
        error = RemoteVerificationError("stat failed")
        assert str(error) == "[REMOTE_VERIFICATION_FAILED] stat failed"
        assert error.message == "stat failed"

    def test_prefixed_keeps_class_and_code(self):
        error = HostTrustError("no host key", ErrorCode.HOSTKEY_CHANGED)
        wrapped = error.prefixed("Configuration error")

        assert isinstance(wrapped, HostTrustError)
        assert wrapped.code is ErrorCode.HOSTKEY_CHANGED
        assert wrapped.message == "Configuration error: no host key"
        assert wrapped.__cause__ is error
        assert error.message == "no host key"

    def test_all_errors_share_base(self):
        assert issubclass(RemoteVerificationError, MountSshfsError)
