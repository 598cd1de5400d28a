"""Tests for the wrench console-script entry point.

Covers:
- Help and version output with exit status 0
- Usage errors on stderr with exit status 2
- Hand-off of the built Config to a driver
- Dry-run printing of the resolved configuration
- The --skip-uploads without --api warning
- Ctrl-C handling
"""

from __future__ import annotations

import json
import signal

import pytest

from wrench.app import load_config, main
from wrench.exceptions import InvalidFormat, MultipleSubcommands
from wrench.exit_codes import EXIT_INTERRUPTED, EXIT_INVALID_USAGE, EXIT_SUCCESS
from wrench.models import Config, ShowMode


@pytest.fixture(autouse=True)
def _no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep diagnostics free of ANSI codes so assertions stay simple."""
    monkeypatch.setenv("NO_COLOR", "1")


class TestLoadConfig:
    def test_builds_config(self) -> None:
        config = load_config(["show", "scene.yaml"])
        assert config.mode == ShowMode(input_path="scene.yaml")

    def test_propagates_errors(self) -> None:
        with pytest.raises(MultipleSubcommands):
            load_config(["show", "a.yaml", "replay", "b.bin"])
        with pytest.raises(InvalidFormat):
            load_config(["--size", "abcx768", "show", "x.yaml"])


class TestHelpAndVersion:
    """--help and --version print to stdout and exit 0."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-V"])
        assert exc_info.value.code == EXIT_SUCCESS
        assert capsys.readouterr().out == "wrench 0.1\n"

    def test_root_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert "wrench [FLAGS] [OPTIONS] <SUBCOMMAND>" in captured.out
        assert captured.err == ""

    def test_subcommand_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["replay", "-h"])
        assert exc_info.value.code == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert out.startswith("wrench-replay")
        assert "--skip-uploads" in out


class TestUsageErrors:
    """Malformed invocations exit 2 with an actionable message."""

    def test_invalid_size(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--size", "abcx768", "show", "x.yaml"])
        assert exc_info.value.code == EXIT_INVALID_USAGE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: Invalid value 'abcx768' for '--size <WxH>'" in captured.err
        assert "WIDTHxHEIGHT" in captured.err
        assert "USAGE:" in captured.err
        assert "For more information try --help" in captured.err

    def test_invalid_save_lists_choices(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--save", "xml", "show", "x.yaml"])
        assert exc_info.value.code == EXIT_INVALID_USAGE
        assert "[yaml, json]" in capsys.readouterr().err

    def test_missing_input_shows_subcommand_usage(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["replay"])
        assert exc_info.value.code == EXIT_INVALID_USAGE
        err = capsys.readouterr().err
        assert "<INPUT>" in err
        assert "wrench replay [FLAGS] <INPUT>" in err

    def test_missing_subcommand(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == EXIT_INVALID_USAGE
        assert "show, replay" in capsys.readouterr().err

    def test_unknown_argument(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--fullscreen", "show", "a.yaml"])
        assert exc_info.value.code == EXIT_INVALID_USAGE
        assert "'--fullscreen'" in capsys.readouterr().err

    def test_oversized_size_is_a_usage_error(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-s", "1" * 5000 + "x1", "show", "a.yaml"])
        assert exc_info.value.code == EXIT_INVALID_USAGE
        assert "WIDTHxHEIGHT" in capsys.readouterr().err

    def test_missing_value_names_option(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["show", "scene.yaml", "-q"])
        assert exc_info.value.code == EXIT_INVALID_USAGE
        err = capsys.readouterr().err
        assert "--queue <N>" in err
        assert "wrench show [FLAGS] [OPTIONS] <INPUT>" in err


class TestHandOff:
    """A successful build reaches the driver or is printed."""

    def test_driver_receives_config(self) -> None:
        received: list[Config] = []
        main(["-d", "show", "-q", "3", "scene.yaml"], driver=received.append)
        assert len(received) == 1
        assert received[0].debug is True
        assert received[0].mode == ShowMode(queue_depth=3, input_path="scene.yaml")

    def test_dry_run_prints_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["-s", "800x600", "--save", "yaml", "show", "scene.yaml"])
        data = json.loads(capsys.readouterr().out)
        assert data["window_size"] == {"width": 800, "height": 600}
        assert data["save_format"] == "yaml"
        assert data["mode"]["kind"] == "show"
        assert data["mode"]["queue_depth"] == 1

    def test_skip_uploads_without_api_warns(self, capsys: pytest.CaptureFixture[str]) -> None:
        received: list[Config] = []
        main(["replay", "--skip-uploads", "rec.bin"], driver=received.append)
        assert len(received) == 1
        assert "--skip-uploads has no effect without --api" in capsys.readouterr().err

    def test_skip_uploads_with_api_is_quiet(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["replay", "--api", "--skip-uploads", "rec.bin"], driver=lambda config: None)
        assert capsys.readouterr().err == ""


class TestInterrupt:
    """Ctrl-C while the driver runs exits 130 without touching signal handlers."""

    def test_interrupted_driver(self, capsys: pytest.CaptureFixture[str]) -> None:
        def driver(config: Config) -> None:
            raise KeyboardInterrupt

        with pytest.raises(SystemExit) as exc_info:
            main(["show", "scene.yaml"], driver=driver)
        assert exc_info.value.code == EXIT_INTERRUPTED
        assert "Cancelled." in capsys.readouterr().err

    def test_sigint_handler_is_left_alone(self) -> None:
        before = signal.getsignal(signal.SIGINT)
        main(["show", "scene.yaml"], driver=lambda config: None)
        assert signal.getsignal(signal.SIGINT) is before
