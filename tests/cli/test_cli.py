"""
Tests for the CLI: argument parsing, exit codes, console output and main().
"""

import json
import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from marathon2consul import __version__
from marathon2consul.adapters.config.environment import ENV_KEY_MAP
from marathon2consul.application.sync import SyncResult
from marathon2consul.cli import ExitCode, create_parser, main
from marathon2consul.cli.output import Console
from marathon2consul.core.domain import ApplicationDefinition, PortDefinition
from marathon2consul.core.exceptions import ConfigError
from marathon2consul.core.ports import (
    AuthenticationError,
    NotFoundError,
    RegistryError,
    RegistryTransientError,
    TransientError,
)
from marathon2consul.core.translation import translate


# =============================================================================
# Argument Parser Tests
# =============================================================================


class TestCreateParser:
    """Tests for the argument parser."""

    def test_defaults(self):
        args = create_parser().parse_args([])

        assert args.app_id is None
        assert args.execute is False
        assert args.deregister is False
        assert args.output == "text"
        assert args.log_format == "text"
        assert args.port_overrides is None

    def test_short_flags(self):
        args = create_parser().parse_args(["-a", "/prod/web", "-x", "-v", "-o", "json"])

        assert args.app_id == "/prod/web"
        assert args.execute is True
        assert args.verbose is True
        assert args.output == "json"

    def test_port_override_repeatable(self):
        args = create_parser().parse_args(["-p", "0=31000", "--port-override", "1=31001"])

        assert args.port_overrides == ["0=31000", "1=31001"]

    def test_invalid_output_rejected(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--output", "xml"])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


# =============================================================================
# Exit Code Tests
# =============================================================================


class TestExitCode:
    """Tests for ExitCode."""

    def test_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.ERROR == 1
        assert ExitCode.CONFIG_ERROR == 2
        assert ExitCode.CONNECTION_ERROR == 4
        assert ExitCode.PARTIAL_SUCCESS == 6
        assert ExitCode.CANCELLED == 130

    @pytest.mark.parametrize(
        "exc,code",
        [
            (KeyboardInterrupt(), ExitCode.CANCELLED),
            (ConfigError("bad"), ExitCode.CONFIG_ERROR),
            (AuthenticationError("denied"), ExitCode.CONNECTION_ERROR),
            (TransientError("502"), ExitCode.CONNECTION_ERROR),
            (RegistryTransientError("503"), ExitCode.CONNECTION_ERROR),
            (ConnectionError("refused"), ExitCode.CONNECTION_ERROR),
            (NotFoundError("missing"), ExitCode.ERROR),
            (ValueError("other"), ExitCode.ERROR),
        ],
    )
    def test_from_exception(self, exc, code):
        assert ExitCode.from_exception(exc) == code


# =============================================================================
# Console Tests
# =============================================================================


class TestConsole:
    """Tests for Console output modes."""

    def test_json_mode_disables_color(self):
        assert Console(color=True, json_mode=True).color is False

    def test_quiet_suppresses_info(self, capsys):
        console = Console(color=False, quiet=True)
        console.info("hidden")
        console.success("hidden")

        assert capsys.readouterr().out == ""

    def test_error_goes_to_stderr(self, capsys):
        Console(color=False).error("boom")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "boom" in captured.err

    def test_json_mode_collects_errors(self, capsys):
        console = Console(json_mode=True)
        console.error("first")
        console.error("second")
        console.flush_errors()

        assert json.loads(capsys.readouterr().out) == {
            "success": False,
            "errors": ["first", "second"],
        }

    def test_registrations_json(self, capsys, web_app, clock):
        Console(json_mode=True).registrations(translate(web_app, clock=clock))

        output = json.loads(capsys.readouterr().out)
        assert output["app_id"] == "prod.myapp"
        assert output["registrations"][0]["ID"] == "marathon-app-prod-myapp-8080-myapp"
        assert output["registrations"][0]["Weights"] == {"Passing": 5, "Warning": 1}
        assert output["errors"] == []

    def test_registrations_quiet(self, capsys, multi_port_app, clock):
        Console(quiet=True).registrations(translate(multi_port_app, clock=clock))

        assert capsys.readouterr().out.split() == [
            "marathon-app-cart-31000-",
            "marathon-app-cart-admin-31001-",
        ]

    def test_registrations_table(self, capsys, web_app, clock):
        Console(color=False).registrations(translate(web_app, clock=clock))

        out = capsys.readouterr().out
        assert "Registrations for prod.myapp" in out
        assert "marathon-app-prod-myapp-8080-myapp" in out

    def test_registrations_warnings_listed(self, capsys, clock):
        app = ApplicationDefinition(
            id="/a", labels={"weight": "heavy"}, ports=[PortDefinition(port=80)]
        )
        Console(color=False).registrations(translate(app, clock=clock))

        out = capsys.readouterr().out
        assert "1 warning(s)" in out
        assert "bad_weight" in out

    def test_sync_result_quiet(self, capsys):
        result = SyncResult(app_id="/a", dry_run=False, services_planned=1, services_registered=1)
        Console(quiet=True).sync_result(result)

        assert capsys.readouterr().out.strip() == (
            "status=OK mode=executed planned=1 registered=1"
        )

    def test_sync_result_json_with_failures(self, capsys):
        result = SyncResult(app_id="/a", dry_run=False, services_planned=2, services_registered=1)
        result.registered_ids.append("svc-1")
        result.add_failed_operation("register", "svc-2", "refused")

        Console(json_mode=True).sync_result(result)

        output = json.loads(capsys.readouterr().out)
        assert output["success"] is False
        assert output["registered"] == ["svc-1"]
        assert output["failed_operations"] == [
            {"operation": "register", "service_id": "svc-2", "error": "refused"}
        ]

    def test_sync_result_text(self, capsys):
        result = SyncResult(app_id="/a", dry_run=False, services_planned=1, services_registered=1)
        result.registered_ids.append("svc-1")

        Console(color=False).sync_result(result)

        out = capsys.readouterr().out
        assert "LIVE EXECUTION" in out
        assert "svc-1" in out
        assert "Sync completed successfully!" in out


# =============================================================================
# main() Tests
# =============================================================================


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Empty working directory and no provider env vars."""
    for key in ENV_KEY_MAP:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    with patch("marathon2consul.cli.app.setup_logging"):
        yield tmp_path


@pytest.fixture
def marathon(cli_env, web_app):
    adapter = Mock()
    adapter.name = "Marathon"
    adapter.test_connection.return_value = True
    adapter.fetch.return_value = web_app
    with patch("marathon2consul.cli.app.MarathonAdapter", return_value=adapter):
        yield adapter


@pytest.fixture
def consul(cli_env):
    adapter = Mock()
    adapter.name = "Consul"
    adapter.test_connection.return_value = True
    with patch("marathon2consul.cli.app.ConsulAdapter", return_value=adapter) as cls:
        adapter.factory = cls
        yield adapter


BASE_ARGS = ["--app-id", "prod.myapp", "--marathon-url", "http://marathon.mesos:8080"]


class TestMain:
    """Tests for the main() workflow with mocked adapters."""

    def test_missing_config(self, cli_env, capsys):
        assert main([]) == ExitCode.CONFIG_ERROR

        err = capsys.readouterr().err
        assert "MARATHON_URL" in err
        assert "MARATHON_APP_ID" in err

    def test_malformed_port_override(self, cli_env):
        assert main([*BASE_ARGS, "-p", "zero=1"]) == ExitCode.CONFIG_ERROR

    def test_dry_run_prints_plan(self, marathon, consul, capsys):
        exit_code = main([*BASE_ARGS, "-o", "json"])

        assert exit_code == ExitCode.SUCCESS
        output = json.loads(capsys.readouterr().out)
        assert [r["ID"] for r in output["registrations"]] == [
            "marathon-app-prod-myapp-8080-myapp"
        ]
        consul.test_connection.assert_not_called()
        consul.register.assert_not_called()
        assert consul.factory.call_args.kwargs["dry_run"] is True

    def test_dry_run_applies_port_override(self, marathon, consul, capsys):
        main([*BASE_ARGS, "-o", "json", "-p", "0=31005"])

        output = json.loads(capsys.readouterr().out)
        assert output["registrations"][0]["Port"] == 31005

    def test_execute_registers(self, marathon, consul, capsys):
        exit_code = main([*BASE_ARGS, "-x", "-o", "json"])

        assert exit_code == ExitCode.SUCCESS
        consul.register.assert_called_once()
        output = json.loads(capsys.readouterr().out)
        assert output["dry_run"] is False
        assert output["registered"] == ["marathon-app-prod-myapp-8080-myapp"]

    def test_execute_partial_failure(self, marathon, consul):
        marathon.fetch.return_value = ApplicationDefinition(
            id="/prod/web",
            ports=[PortDefinition(port=80, name="http"), PortDefinition(port=81, name="admin")],
        )
        consul.register.side_effect = [RegistryError("refused"), None]

        assert main([*BASE_ARGS, "-x", "-q"]) == ExitCode.PARTIAL_SUCCESS

    def test_execute_total_failure(self, marathon, consul):
        consul.register.side_effect = RegistryError("refused")

        assert main([*BASE_ARGS, "-x", "-q"]) == ExitCode.ERROR

    def test_deregister(self, marathon, consul):
        exit_code = main([*BASE_ARGS, "-x", "--deregister", "-q"])

        assert exit_code == ExitCode.SUCCESS
        consul.deregister.assert_called_once_with("marathon-app-prod-myapp-8080-myapp")
        consul.register.assert_not_called()

    def test_marathon_unreachable(self, marathon, consul, capsys):
        marathon.test_connection.return_value = False

        assert main(BASE_ARGS) == ExitCode.CONNECTION_ERROR
        assert "Cannot connect to Marathon" in capsys.readouterr().err

    def test_consul_unreachable_when_executing(self, marathon, consul):
        consul.test_connection.return_value = False

        assert main([*BASE_ARGS, "-x"]) == ExitCode.CONNECTION_ERROR

    def test_plan_not_found(self, marathon, consul, capsys):
        marathon.fetch.side_effect = NotFoundError("Application not found: prod.myapp")

        assert main([*BASE_ARGS, "-o", "json"]) == ExitCode.ERROR
        output = json.loads(capsys.readouterr().out)
        assert output["errors"] == ["Application not found: prod.myapp"]

    def test_plan_auth_failure(self, marathon, consul):
        marathon.fetch.side_effect = AuthenticationError("401")

        assert main(BASE_ARGS) == ExitCode.CONNECTION_ERROR

    def test_unexpected_error(self, marathon, consul, capsys):
        with patch("marathon2consul.cli.app.SyncOrchestrator", side_effect=RuntimeError("boom")):
            assert main(BASE_ARGS) == ExitCode.ERROR
        assert "boom" in capsys.readouterr().err

    def test_keyboard_interrupt(self, marathon, consul):
        marathon.fetch.side_effect = KeyboardInterrupt

        assert main(BASE_ARGS) == ExitCode.CANCELLED

    def test_config_file(self, marathon, consul, cli_env, capsys):
        config_file = cli_env / "m2c.yaml"
        config_file.write_text(
            "marathon:\n  url: http://from-file:8080\nsync:\n  app_id: prod.myapp\n"
        )

        assert main(["--config", str(config_file), "-q"]) == ExitCode.SUCCESS
        assert capsys.readouterr().out.strip() == "marathon-app-prod-myapp-8080-myapp"

    def test_run_logs_carry_app_context(self, marathon, consul, caplog):
        with caplog.at_level(logging.INFO, logger="marathon2consul.cli"):
            main([*BASE_ARGS, "-x", "-q"])

        records = [r for r in caplog.records if r.name == "marathon2consul.cli"]
        assert [r.getMessage() for r in records] == ["Starting run", "Run finished"]
        assert all(r.app_id == "prod.myapp" and r.dry_run is False for r in records)
        assert records[-1].registered == 1
        assert records[-1].failed == 0
