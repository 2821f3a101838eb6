"""Tests for the unmunge command line."""

import base64

import httpx
import pytest
import respx
from click.testing import CliRunner
from httpx import Response

from unmunge.cli import main

from conftest import AUTHORITY_URL, DECODE_URL


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, args, credential=b""):
    return runner.invoke(main, ["-S", AUTHORITY_URL, *args], input=credential)


class TestCLI:
    """Tests for the unmunge command."""

    def test_list_tags(self, runner):
        """Test that --list-tags prints the registry and exits."""
        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(DECODE_URL)
            result = runner.invoke(main, ["-T"])

        assert result.exit_code == 0
        assert result.stdout.split() == ["STATUS-CODE", "STATUS-TEXT", "UID", "GID", "LENGTH"]
        assert route.call_count == 0

    @respx.mock
    def test_default_output(self, runner, credential, success_body):
        """Test metadata, blank line and payload on stdout."""
        respx.post(DECODE_URL).mock(return_value=Response(200, json=success_body))

        result = invoke(runner, [], credential)

        assert result.exit_code == 0
        assert result.stdout_bytes == (
            b"STATUS-CODE:  0\n"
            b"STATUS-TEXT:  Success\n"
            b"UID:          1000\n"
            b"GID:          100\n"
            b"LENGTH:       5\n"
            b"\n"
            b"hello"
        )

    @respx.mock
    def test_failure_exit_code(self, runner, credential):
        """Test that a bad credential exits with its status code."""
        respx.post(DECODE_URL).mock(
            return_value=Response(400, json={"status": 8, "message": "Invalid credential format"})
        )

        result = invoke(runner, ["-t", "status-code,uid"], credential)

        assert result.exit_code == 8
        assert result.stdout_bytes == b"STATUS-CODE:  8\n"

    @respx.mock
    def test_tags_repeatable(self, runner, credential, success_body):
        """Test that several --tags options combine."""
        respx.post(DECODE_URL).mock(return_value=Response(200, json=success_body))

        result = invoke(runner, ["-t", "gid", "-t", "UID", "-o", "-"], credential)

        assert result.exit_code == 0
        assert result.stdout_bytes == b"UID:          1000\nGID:          100\n\nhello"

    @respx.mock
    def test_separate_files(self, runner, tmp_path, credential, success_body):
        """Test metadata and payload written to separate files."""
        payload = bytes(range(256))
        success_body["payload"] = base64.b64encode(payload).decode()
        respx.post(DECODE_URL).mock(return_value=Response(200, json=success_body))
        cred = tmp_path / "cred.txt"
        cred.write_bytes(credential)
        meta = tmp_path / "meta.txt"
        out = tmp_path / "out.bin"

        result = invoke(
            runner, ["-i", str(cred), "-m", str(meta), "-o", str(out), "-t", "length"]
        )

        assert result.exit_code == 0
        assert result.stdout_bytes == b""
        assert meta.read_bytes() == b"LENGTH:       256\n"
        assert out.read_bytes() == payload

    @respx.mock
    def test_no_output(self, runner, credential, success_body):
        """Test that --no-output discards everything but the exit code."""
        respx.post(DECODE_URL).mock(return_value=Response(200, json=success_body))

        result = invoke(runner, ["-n"], credential)

        assert result.exit_code == 0
        assert result.stdout_bytes == b""

    def test_aliasing(self, runner, tmp_path, credential):
        """Test that writing to the input file is refused before decoding."""
        cred = tmp_path / "cred.txt"
        cred.write_bytes(credential)

        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(DECODE_URL)
            result = invoke(runner, ["-i", str(cred), "-o", str(cred)])

        assert result.exit_code == 1
        assert "Cannot read and write to the same file" in result.stderr
        assert result.stdout_bytes == b""
        assert cred.read_bytes() == credential
        assert route.call_count == 0

    def test_missing_input(self, runner, tmp_path):
        """Test that an unreadable input file is fatal."""
        missing = tmp_path / "missing.txt"

        result = invoke(runner, ["-i", str(missing)])

        assert result.exit_code == 1
        assert "Unable to read from" in result.stderr

    @respx.mock
    def test_daemon_unreachable(self, runner, credential):
        """Test that an unreachable daemon is a classified status."""
        respx.post(DECODE_URL).mock(side_effect=httpx.ConnectError("refused"))

        result = invoke(runner, [], credential)

        assert result.exit_code == 6
        assert result.stdout_bytes == b"STATUS-CODE:  6\nSTATUS-TEXT:  Socket communication error\n"

    @respx.mock
    def test_verbose(self, runner, credential, success_body):
        """Test that --verbose reports progress on stderr only."""
        respx.post(DECODE_URL).mock(return_value=Response(200, json=success_body))

        result = invoke(runner, ["-v", "-n"], credential)

        assert result.exit_code == 0
        assert f"Read {len(credential)} bytes from stdin" in result.stderr
        assert result.stdout_bytes == b""

    def test_unexpected_argument(self, runner):
        """Test that stray arguments are usage errors."""
        result = runner.invoke(main, ["extra"])
        assert result.exit_code == 2

    @respx.mock
    def test_daemon_message_cannot_add_lines(self, runner, credential):
        """Test that STATUS-TEXT comes from the status table, not the daemon."""
        respx.post(DECODE_URL).mock(
            return_value=Response(400, json={"status": 15, "message": "Expired\nUID:          0"})
        )

        result = invoke(runner, [], credential)

        assert result.exit_code == 15
        assert result.stdout_bytes == b"STATUS-CODE:  15\nSTATUS-TEXT:  Expired credential\n"

    @respx.mock
    def test_daemon_message_with_lone_surrogate(self, runner, credential):
        """Test that an unencodable daemon message does not crash the run."""
        respx.post(DECODE_URL).mock(
            return_value=Response(
                400,
                content=b'{"status": 14, "message": "bad \\ud800"}',
                headers={"Content-Type": "application/json"},
            )
        )

        result = invoke(runner, ["-v"], credential)

        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert result.exit_code == 14
        assert result.stdout_bytes == b"STATUS-CODE:  14\nSTATUS-TEXT:  Invalid credential\n"
        assert "bad ?" in result.stderr

    @pytest.mark.parametrize("status", [256, 512, 19])
    @respx.mock
    def test_unknown_status_never_exits_zero(self, runner, credential, status):
        """Test that an out-of-table status exits as an internal error."""
        respx.post(DECODE_URL).mock(return_value=Response(400, json={"status": status}))

        result = invoke(runner, [], credential)

        assert result.exit_code == 1
        assert result.stdout_bytes == b"STATUS-CODE:  1\nSTATUS-TEXT:  Internal error\n"

    @respx.mock
    def test_close_failure_reports_write_error_first(
        self, runner, credential, success_body, monkeypatch
    ):
        """Test that both a write failure and a later close failure are reported."""
        from unmunge import session as session_module
        from unmunge.destinations import Destinations
        from unmunge.errors import CloseError, WriteError

        def failing_write(stream, result):
            raise WriteError("Write error: No space left on device")

        def failing_close(self):
            raise CloseError("Unable to close payload output file: I/O error")

        monkeypatch.setattr(session_module, "write_payload", failing_write)
        monkeypatch.setattr(Destinations, "close", failing_close)
        respx.post(DECODE_URL).mock(return_value=Response(200, json=success_body))

        result = invoke(runner, [], credential)

        assert result.exit_code == 1
        stderr = result.stderr
        assert "No space left on device" in stderr
        assert "Unable to close payload output file" in stderr
        assert stderr.index("No space left on device") < stderr.index("Unable to close")
