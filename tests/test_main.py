"""Tests for CLI argument handling in main.py."""
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cliprelay.main import main
from cliprelay.settings import RelaySettings


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_no_mode_specified_exits_with_code_2(self):
        """Test that missing --server or --client gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--port", "3000"])
        assert result.exit_code == 2
        assert "must be specified" in result.output

    def test_both_modes_specified_exits_with_code_2(self):
        """Test that both --server and --client gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--server", "--client"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_invalid_port_exits_with_code_2(self):
        """Test that an out-of-range port gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--client", "--port", "70000"])
        assert result.exit_code == 2

    def test_secure_server_without_key_exits_with_code_2(self):
        """Test that --secure server mode requires key and cert."""
        runner = CliRunner()
        result = runner.invoke(main, ["--server", "--secure", "--cert", "cert.pem"])
        assert result.exit_code == 2
        assert "--key" in result.output

    def test_help_exits_with_code_0(self):
        """Test that --help exits cleanly with code 0."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "server" in result.output.lower()
        assert "client" in result.output.lower()


class TestRunMode:
    """Tests for settings construction and error exits."""

    def test_client_settings_from_options(self):
        """Test options are collected into RelaySettings."""
        runner = CliRunner()
        with patch("cliprelay.main._run_mode") as mock_run:
            result = runner.invoke(
                main,
                ["--client", "-h", "box", "-p", "4000", "--secure", "--interval", "0.5",
                 "--connect-retries", "3"],
            )
        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            RelaySettings(
                server=False,
                host="box",
                port=4000,
                secure=True,
                poll_interval=0.5,
                connect_retries=3,
            )
        )

    def test_connection_error_exits_with_code_1(self):
        """Test a failed connection prints an error and exits 1."""
        runner = CliRunner()
        with (
            patch("cliprelay.main.configure_logging"),
            patch("cliprelay.client.run_client", side_effect=ConnectionError("refused")),
        ):
            result = runner.invoke(main, ["--client"])
        assert result.exit_code == 1
        assert "Error: refused" in result.output

    def test_unreadable_tls_files_exit_with_code_1(self, tmp_path):
        """Test missing TLS files are fatal before the server binds."""
        runner = CliRunner()
        with (
            patch("cliprelay.main.configure_logging"),
            patch("asyncio.start_server") as mock_start,
        ):
            result = runner.invoke(
                main,
                ["--server", "--secure", "--key", str(tmp_path / "k.pem"),
                 "--cert", str(tmp_path / "c.pem")],
            )
        assert result.exit_code == 1
        assert "Error reading TLS files" in result.output
        mock_start.assert_not_called()
