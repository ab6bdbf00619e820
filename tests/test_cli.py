"""
Tests for CLI functionality.

These tests verify the command-line interface logic.
"""

from __future__ import annotations

import argparse
import json
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from pest_correlation import cli
from pest_correlation.cli import (
    cmd_analyze,
    cmd_annotate,
    cmd_delete,
    cmd_fetch_weather,
    cmd_import_detections,
    cmd_info,
    cmd_list,
    cmd_rerun,
    cmd_serve,
    cmd_show,
    create_parser,
    main,
)
from pest_correlation.errors import NotFoundError
from pest_correlation.store import DataStore

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from pest_correlation.manager import AnalysisManager


@pytest.fixture
def use_manager(manager: AnalysisManager) -> Generator[AnalysisManager, None, None]:
    """Route every command through the tmp_path-backed manager."""
    with patch("pest_correlation.cli._manager", return_value=manager):
        yield manager


class TestCreateParser:
    """Tests for create_parser function."""

    def test_creates_parser(self) -> None:
        parser = create_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "pest-correlation"

    def test_parser_has_version(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--version"])

    def test_parser_has_debug_flag(self) -> None:
        args = create_parser().parse_args(["--debug", "info"])
        assert args.debug is True

    def test_analyze_range(self) -> None:
        args = create_parser().parse_args(
            ["analyze", "--start", "2024-06-01", "--end", "2024-06-30", "--owner", "a@example.com"]
        )
        assert (args.command, args.start, args.end, args.owner) == (
            "analyze",
            "2024-06-01",
            "2024-06-30",
            "a@example.com",
        )

    def test_analyze_defaults(self) -> None:
        args = create_parser().parse_args(["analyze"])
        assert (args.start, args.end, args.owner) == (None, None, None)

    def test_list_limit(self) -> None:
        args = create_parser().parse_args(["list", "--limit", "3"])
        assert args.limit == 3

    def test_annotate(self) -> None:
        args = create_parser().parse_args(["annotate", "corr-1", "--notes", "sprayed"])
        assert (args.analysis_id, args.name, args.notes) == ("corr-1", None, "sprayed")

    def test_serve_port(self) -> None:
        assert create_parser().parse_args(["serve"]).port is None
        assert create_parser().parse_args(["serve", "--port", "3000"]).port == 3000

    @pytest.mark.parametrize("command", ["show", "rerun", "delete"])
    def test_id_required(self, command: str) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args([command])


class TestCmdInfo:
    """Tests for cmd_info function."""

    def test_prints_settings(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("pest_correlation.cli.get_settings") as mock_settings:
            mock_settings.return_value.app_name = "pest-correlation"
            mock_settings.return_value.default_location = "Singapore"
            assert cmd_info(argparse.Namespace()) == 0

        out = capsys.readouterr().out
        assert "Application: pest-correlation" in out
        assert "Default location: Singapore" in out


class TestAnalysisCommands:
    """analyze, list, show, annotate, rerun, delete."""

    def test_analyze(
        self, use_manager: AnalysisManager, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = argparse.Namespace(start="2024-06-01", end="2024-06-30", owner=None)
        assert cmd_analyze(args) == 0

        out = capsys.readouterr().out
        assert "Range: 2024-06-01 to 2024-06-30  Owner: all" in out
        assert "High Humidity (>55%)" in out
        assert "samples=No data" in out
        assert len(use_manager.list_analyses()) == 1

    def test_list_empty(
        self, use_manager: AnalysisManager, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert cmd_list(argparse.Namespace(owner=None, limit=5)) == 0
        assert "No analyses found." in capsys.readouterr().out

    def test_list(self, use_manager: AnalysisManager, capsys: pytest.CaptureFixture[str]) -> None:
        record = use_manager.create("2024-06-01", "2024-06-30")
        use_manager.update_metadata(record.id, name="June")

        assert cmd_list(argparse.Namespace(owner=None, limit=5)) == 0
        out = capsys.readouterr().out
        assert f"{record.id} 'June'  2024-06-01 to 2024-06-30" in out

    def test_show(self, use_manager: AnalysisManager, capsys: pytest.CaptureFixture[str]) -> None:
        record = use_manager.create("2024-06-01", "2024-06-30")

        assert cmd_show(argparse.Namespace(analysis_id=record.id)) == 0
        shown = json.loads(capsys.readouterr().out)
        assert shown["id"] == record.id
        assert shown["dateRange"] == "2024-06-01 to 2024-06-30"

    def test_annotate(self, use_manager: AnalysisManager) -> None:
        record = use_manager.create("2024-06-01", "2024-06-30")
        args = argparse.Namespace(analysis_id=record.id, name="June", notes=None)

        assert cmd_annotate(args) == 0
        assert use_manager.get(record.id).name == "June"

    def test_rerun(self, use_manager: AnalysisManager) -> None:
        record = use_manager.create("2024-06-01", "2024-06-30")
        args = argparse.Namespace(
            analysis_id=record.id, start="2024-06-15", end="2024-06-30", owner=None
        )

        assert cmd_rerun(args) == 0
        stored = use_manager.get(record.id)
        assert stored.date_range == "2024-06-15 to 2024-06-30"
        assert stored.updated_at is not None

    def test_delete(self, use_manager: AnalysisManager) -> None:
        record = use_manager.create("2024-06-01", "2024-06-30")

        assert cmd_delete(argparse.Namespace(analysis_id=record.id)) == 0
        with pytest.raises(NotFoundError):
            use_manager.get(record.id)


class TestCmdFetchWeather:
    """Tests for cmd_fetch_weather function."""

    def test_runs_flow(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("pest_correlation.cli.fetch_weather") as mock_flow:
            mock_flow.return_value = {
                "location": "Singapore",
                "weather_id": "Singapore-2024-06-01-09",
            }
            args = argparse.Namespace(location="Singapore", schedule=False)
            assert cmd_fetch_weather(args) == 0

        mock_flow.assert_called_once_with(location="Singapore")
        assert "Singapore-2024-06-01-09" in capsys.readouterr().out

    def test_schedule(self) -> None:
        with (
            patch("pest_correlation.cli.serve_schedule") as mock_serve,
            patch("pest_correlation.cli.fetch_weather") as mock_flow,
        ):
            assert cmd_fetch_weather(argparse.Namespace(location=None, schedule=True)) == 0

        mock_serve.assert_called_once_with()
        mock_flow.assert_not_called()


class TestCmdImportDetections:
    """Tests for cmd_import_detections function."""

    @pytest.fixture
    def settings(self, tmp_path: Path) -> Generator[Mock, None, None]:
        settings = Mock()
        settings.data_dir = tmp_path / "data"
        with patch("pest_correlation.cli.get_settings", return_value=settings):
            yield settings

    def _stored_ids(self, settings: Mock) -> list[str]:
        return [d["id"] for d in DataStore(settings.data_dir).list_documents("detections")]

    def test_import_list(self, settings: Mock, tmp_path: Path) -> None:
        path = tmp_path / "detections.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "id": "d1",
                        "owner": "a@example.com",
                        "createdAt": "2024-06-01T08:00:00Z",
                        "label": "bad",
                    },
                    {
                        "id": "d2",
                        "userEmail": "b@example.com",
                        "createdAt": "2024-06-02T09:30:00Z",
                        "label": "good",
                    },
                ]
            )
        )

        assert cmd_import_detections(argparse.Namespace(path=path)) == 0
        assert self._stored_ids(settings) == ["d1", "d2"]

    def test_import_table_export(self, settings: Mock, tmp_path: Path) -> None:
        path = tmp_path / "export.json"
        path.write_text(
            json.dumps(
                {"Items": [{"id": "d3", "createdAt": "2024-06-03T10:00:00Z", "label": "bad"}]}
            )
        )

        assert cmd_import_detections(argparse.Namespace(path=path)) == 0
        assert self._stored_ids(settings) == ["d3"]

    def test_missing_file(
        self, settings: Mock, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert cmd_import_detections(argparse.Namespace(path=tmp_path / "nope.json")) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_record(
        self, settings: Mock, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"id": "d1", "label": "bad"}]))

        assert cmd_import_detections(argparse.Namespace(path=path)) == 1
        assert "Invalid detection record" in capsys.readouterr().err
        assert self._stored_ids(settings) == []

    def test_not_json(
        self, settings: Mock, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "detections.json"
        path.write_text("not json")

        assert main(["import-detections", str(path)]) == 1
        assert "Not a JSON file" in capsys.readouterr().err

    @pytest.mark.parametrize("payload", ["a string", 42, {"data": {"id": "d1"}}])
    def test_not_a_list(
        self,
        settings: Mock,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        payload: object,
    ) -> None:
        path = tmp_path / "detections.json"
        path.write_text(json.dumps(payload))

        assert main(["import-detections", str(path)]) == 1
        assert "Expected a list of detections" in capsys.readouterr().err
        assert self._stored_ids(settings) == []

    def test_unstorable_id(
        self, settings: Mock, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "detections.json"
        path.write_text(
            json.dumps([{"id": "a/b", "createdAt": "2024-06-01T08:00:00Z", "label": "bad"}])
        )

        assert main(["import-detections", str(path)]) == 1
        assert "Error: Detection id 'a/b' cannot be stored" in capsys.readouterr().err
        assert self._stored_ids(settings) == []


class TestCmdServe:
    """Tests for cmd_serve function."""

    def test_uses_settings_port(self) -> None:
        with (
            patch("uvicorn.run") as mock_run,
            patch("pest_correlation.cli.get_settings") as mock_settings,
        ):
            mock_settings.return_value.api_host = "127.0.0.1"
            mock_settings.return_value.api_port = 5555
            assert cmd_serve(argparse.Namespace(port=None)) == 0

        mock_run.assert_called_once_with("pest_correlation.api:app", host="127.0.0.1", port=5555)

    def test_port_override(self) -> None:
        with patch("uvicorn.run") as mock_run:
            cmd_serve(argparse.Namespace(port=3000))
        assert mock_run.call_args.kwargs["port"] == 3000


class TestMain:
    """Tests for main function."""

    def test_no_command_shows_help(self) -> None:
        assert main([]) == 0

    @pytest.mark.parametrize("command", ["info", "list", "serve"])
    def test_dispatch(self, command: str) -> None:
        handler = Mock(return_value=0)
        with patch.dict(cli.COMMANDS, {command: handler}):
            assert main([command]) == 0
        handler.assert_called_once()

    def test_engine_error_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        handler = Mock(side_effect=NotFoundError("Correlation analysis not found: corr-x"))
        with patch.dict(cli.COMMANDS, {"show": handler}):
            assert main(["show", "corr-x"]) == 1
        assert "Error: Correlation analysis not found: corr-x" in capsys.readouterr().err

    def test_unknown_command_shows_help(self) -> None:
        with patch("pest_correlation.cli.create_parser") as mock_parser:
            mock_parser.return_value.parse_args.return_value = argparse.Namespace(
                command="unknown", debug=False
            )
            assert main([]) == 1
