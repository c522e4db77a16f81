"""Tests for the letterbox CLI: app resolution, flag handling, entry point."""

import argparse
import logging
import sys
import types

import pytest

from letterbox.app import App
from letterbox.cli import DEFAULT_APP, main
from letterbox.cli._resolve import resolve_app
from letterbox.cli._run import build_config, run_server
from letterbox.config import AppConfig
from letterbox.errors import BindError
from letterbox.server.runner import configure_logging


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with letterbox apps on sys.modules."""
    mod = types.ModuleType("_fake_letterbox_app")
    mod.app = App()  # type: ignore[attr-defined]
    mod.custom = App()  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    mod.factory = lambda: App()  # type: ignore[attr-defined]
    mod.config_factory = lambda config: App(config)  # type: ignore[attr-defined]
    mod.bad_factory = lambda: 42  # type: ignore[attr-defined]

    def exploding():
        raise ValueError("no database")

    mod.exploding = exploding  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_letterbox_app", mod)


def _args(**overrides: object) -> argparse.Namespace:
    values: dict[str, object] = {
        "app": DEFAULT_APP,
        "host": None,
        "port": None,
        "uds": None,
        "max_connections": None,
        "log_level": None,
        "debug": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.mark.usefixtures("_fake_app_module")
class TestResolveApp:
    def test_explicit_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_letterbox_app:custom"), App)

    def test_default_attribute(self) -> None:
        """Omitting :attr defaults to 'app'."""
        assert resolve_app("_fake_letterbox_app") is sys.modules["_fake_letterbox_app"].app

    def test_factory_without_parameters(self) -> None:
        assert isinstance(resolve_app("_fake_letterbox_app:factory"), App)

    def test_factory_receives_config(self) -> None:
        config = AppConfig(debug=True)
        app = resolve_app("_fake_letterbox_app:config_factory", config)
        assert app.config is config

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("nonexistent_module_xyz:app")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_app("_fake_letterbox_app:does_not_exist")

    def test_not_an_app(self) -> None:
        with pytest.raises(TypeError, match="not a letterbox.App"):
            resolve_app("_fake_letterbox_app:not_an_app")

    def test_factory_returning_wrong_type(self) -> None:
        with pytest.raises(TypeError, match="int"):
            resolve_app("_fake_letterbox_app:bad_factory")

    def test_factory_error_is_wrapped(self) -> None:
        with pytest.raises(TypeError, match="no database"):
            resolve_app("_fake_letterbox_app:exploding")

    def test_default_app_string(self) -> None:
        app = resolve_app(DEFAULT_APP, AppConfig(port=0))
        assert [route.path for route in app.router.routes] == ["/health_check"]


class TestBuildConfig:
    def test_no_flags_keeps_defaults(self) -> None:
        assert build_config(_args()) == AppConfig()

    def test_flags_override(self) -> None:
        config = build_config(
            _args(host="0.0.0.0", port=0, max_connections=5, log_level="debug", debug=True)
        )
        assert config.host == "0.0.0.0"
        assert config.port == 0
        assert config.max_connections == 5
        assert config.log_level == "debug"
        assert config.debug is True

    def test_base_values_survive(self) -> None:
        config = build_config(_args(port=9000), AppConfig(keep_alive_timeout=1))
        assert config.port == 9000
        assert config.keep_alive_timeout == 1


class TestRunServer:
    def test_unresolvable_app_exits_1(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run_server(_args(app="nonexistent_module_xyz:app"))
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_bind_error_exits_1(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def refuse(app, config):
            raise BindError(f"Could not bind {config.host}:{config.port}: Address already in use")

        monkeypatch.setattr("letterbox.server.runner.run", refuse)
        with pytest.raises(SystemExit) as exc_info:
            run_server(_args(port=8123))
        assert exc_info.value.code == 1
        assert "8123" in capsys.readouterr().err

    def test_flags_reach_runner(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[App, AppConfig]] = []
        monkeypatch.setattr("letterbox.server.runner.run", lambda app, config: calls.append((app, config)))
        run_server(_args(port=0, max_connections=3, debug=True))
        (app, config), = calls
        assert config.port == 0
        assert config.max_connections == 3
        assert app.config.debug is True


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "letterbox" in capsys.readouterr().out

    def test_run_defaults_to_newsletter_app(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[argparse.Namespace] = []
        monkeypatch.setattr("letterbox.cli._run.run_server", seen.append)
        main(["run", "--port", "0"])
        assert seen[0].app == DEFAULT_APP
        assert seen[0].port == 0


class TestConfigureLogging:
    def test_sets_level_and_single_handler(self, monkeypatch: pytest.MonkeyPatch) -> None:
        names = ("letterbox", "uvicorn.error", "uvicorn.access")
        loggers = [logging.getLogger(name) for name in names]
        for logger in loggers:
            monkeypatch.setattr(logger, "handlers", [])
            monkeypatch.setattr(logger, "level", logger.level)
        configure_logging("debug")
        configure_logging("warning")
        for logger in loggers:
            assert logger.level == logging.WARNING
            assert len(logger.handlers) == 1
