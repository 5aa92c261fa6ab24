"""Tests for the remote verification sequence."""
from unittest.mock import MagicMock

import pytest

from mount_sshfs.services.connection_checker import (
    CheckResult,
    ConnectionChecker,
    probe_command,
)
from mount_sshfs.shared.errors import (
    ErrorCode,
    HostTrustError,
    IdentityError,
    InvalidRemoteFormatError,
    MountSshfsError,
    RemoteVerificationError,
)
from mount_sshfs.shared.models import SshSettings

MODULE = "mount_sshfs.services.connection_checker"


class FakeEngine:
    """Stands in for SshEngine and records what happens to it."""

    status = 0
    events: list

    def __init__(self, address, trust, identity, settings=None, stream=None, logger=None):
        self.address = address
        self.directory = address.directory
        FakeEngine.events.append("init")

    def __enter__(self):
        FakeEngine.events.append("enter")
        return self

    def __exit__(self, exc_type, exc, tb):
        FakeEngine.events.append("exit")
        return False

    def run_probe(self, command):
        FakeEngine.events.append(command)
        return FakeEngine.status


@pytest.fixture
def fake_ssh(monkeypatch):
    """Replace trust, identity and engine with fakes."""
    FakeEngine.events = []
    FakeEngine.status = 0

    resolver = MagicMock()
    resolver.return_value.resolve.return_value = MagicMock(
        hostname="example.com", known_keys={"ecdsa-sha2-nistp256": MagicMock()}
    )
    identity = MagicMock()
    identity.return_value.get_name.return_value = "ssh-rsa"

    monkeypatch.setattr(f"{MODULE}.HostTrustResolver", resolver)
    monkeypatch.setattr(f"{MODULE}.load_identity", identity)
    monkeypatch.setattr(f"{MODULE}.SshEngine", FakeEngine)
    return resolver, identity


def test_probe_command_quotes_directory():
    assert probe_command("/data") == "stat /data"
    assert probe_command("/my data") == "stat '/my data'"


def test_verify_success(fake_ssh):
    checker = ConnectionChecker("alice@example.com:/data/")
    checker.verify()

    assert checker.all_passed()
    assert [r.name for r in checker.results] == [
        "Remote Address", "Host Key", "Identity", "SSH Handshake", "Remote Directory",
    ]
    assert FakeEngine.events == ["init", "enter", "stat /data", "exit"]


def test_verify_passes_settings_through(fake_ssh, tmp_path):
    resolver, identity = fake_ssh
    settings = SshSettings(
        identity_path=tmp_path / "key", known_hosts_path=tmp_path / "hosts", port=2222
    )

    ConnectionChecker("alice@example.com:/data", settings=settings).verify()

    resolver.assert_called_once_with(tmp_path / "hosts")
    resolver.return_value.resolve.assert_called_once_with("example.com", 2222)
    identity.assert_called_once_with(tmp_path / "key")


def test_invalid_remote_fails_before_any_network_step(fake_ssh):
    resolver, identity = fake_ssh
    checker = ConnectionChecker("bob@host")

    with pytest.raises(InvalidRemoteFormatError):
        checker.verify()

    resolver.assert_not_called()
    identity.assert_not_called()
    assert FakeEngine.events == []
    assert checker.results[-1].name == "Remote Address"
    assert checker.all_passed() is False


def test_host_trust_failure_stops_sequence(fake_ssh):
    resolver, identity = fake_ssh
    resolver.return_value.resolve.side_effect = HostTrustError("no host key")
    checker = ConnectionChecker("alice@example.com:/data")

    with pytest.raises(HostTrustError):
        checker.verify()

    identity.assert_not_called()
    assert FakeEngine.events == []
    assert checker.results[-1].name == "Host Key"


def test_identity_failure_stops_sequence(fake_ssh):
    _, identity = fake_ssh
    identity.side_effect = IdentityError("unable to read private key")

    with pytest.raises(IdentityError):
        ConnectionChecker("alice@example.com:/data").verify()

    assert FakeEngine.events == []


def test_failed_probe_raises_and_closes_session(fake_ssh):
    FakeEngine.status = 1
    checker = ConnectionChecker("alice@example.com:/missing")

    with pytest.raises(RemoteVerificationError) as excinfo:
        checker.verify()

    assert "exited with status 1" in excinfo.value.message
    assert FakeEngine.events == ["init", "enter", "stat /missing", "exit"]
    assert checker.results[-1].name == "Remote Directory"
    assert checker.results[-1].passed is False


def test_unexpected_error_is_wrapped_and_session_closed(fake_ssh, monkeypatch):
    def boom(self, command):
        raise RuntimeError("boom")

    monkeypatch.setattr(FakeEngine, "run_probe", boom)
    checker = ConnectionChecker("alice@example.com:/data")

    with pytest.raises(MountSshfsError) as excinfo:
        checker.verify()

    assert excinfo.value.code is ErrorCode.UNKNOWN_ERROR
    assert "boom" in excinfo.value.message
    assert FakeEngine.events[-1] == "exit"


def test_debug_logs_summary(fake_ssh):
    logger = MagicMock()
    checker = ConnectionChecker(
        "alice@example.com:/data", settings=SshSettings(debug=True), logger=logger
    )
    checker.verify()

    messages = [call.args[0] for call in logger.debug.call_args_list]
    assert any("PASS Remote Directory" in m for m in messages)
    assert any("[rhost rdir ruser]" in m for m in messages)


def test_get_summary_uses_ascii_status_labels():
    checker = ConnectionChecker("alice@example.com:/data")
    checker.results = [
        CheckResult(name="Remote Address", passed=True, message="ok"),
        CheckResult(name="SSH Handshake", passed=False, message="auth failed"),
    ]

    summary = checker.get_summary()

    assert "PASS Remote Address: ok" in summary
    assert "FAIL SSH Handshake: auth failed" in summary


def test_all_passed_matches_results():
    checker = ConnectionChecker("alice@example.com:/data")
    checker.results = [
        CheckResult(name="a", passed=True, message="ok"),
        CheckResult(name="b", passed=True, message="ok"),
    ]
    assert checker.all_passed() is True

    checker.results.append(CheckResult(name="c", passed=False, message="bad"))
    assert checker.all_passed() is False
