"""End-to-end tests for the nugbot CLI with a mocked registry."""

import csv
import io
import json
from unittest.mock import patch

import pytest

from args import parse_args
from constants import ExitCodes
from errors import FetchError, MalformedManifest
from nugbot import export_csv, export_json, main, output_format, run_update_checker
from versioning.models import UpdateDecision, UpdatePolicy

CSPROJ = """<Project Sdk="Microsoft.NET.Sdk">
  <ItemGroup>
    <PackageReference Include="Newtonsoft.Json" Version="12.0.1" />
    <PackageReference Include="Serilog" Version="2.10.0" />
    <PackageReference Include="Broken" Version="abc" />
    <PackageReference Include="Offline" Version="1.0.0" />
  </ItemGroup>
</Project>"""

REGISTRY = {
    "Newtonsoft.Json": ["12.0.1", "12.0.3", "13.0.1", "13.0.4-beta1"],
    "Serilog": ["2.10.0", "2.12.0", "3.1.1"],
    "Broken": ["1.0.0"],
}


def fake_fetch(name):
    if name not in REGISTRY:
        raise FetchError(name, "registry returned HTTP 503")
    return REGISTRY[name]


def run_main(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestArgs:

    def test_defaults(self):
        args = parse_args(["App.csproj"])
        assert args.MANIFEST == "App.csproj"
        assert args.UPDATE_TYPE is None
        assert args.OUTPUT is None
        assert args.ERROR_ON_UPDATES is False

    def test_update_type_choices(self):
        assert parse_args(["App.csproj", "--update-type", "MAJOR"]).UPDATE_TYPE == "major"
        with pytest.raises(SystemExit) as excinfo:
            parse_args(["App.csproj", "-u", "latest"])
        assert excinfo.value.code == ExitCodes.USAGE_ERROR.value

    def test_manifest_is_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    @pytest.mark.parametrize(
        "argv,expected",
        [
            (["App.csproj"], "json"),
            (["App.csproj", "-o", "out.CSV"], "csv"),
            (["App.csproj", "-o", "out.csv", "-f", "json"], "json"),
            (["App.csproj", "-f", "csv"], "csv"),
        ],
    )
    def test_output_format(self, argv, expected):
        assert output_format(parse_args(argv)) == expected


class TestMain:

    @patch("nugbot.fetch_versions", side_effect=fake_fetch)
    def test_reports_updates_as_json(self, _mock_fetch, write_file, capsys):
        path = write_file("App.csproj", CSPROJ)

        code = run_main([path, "-u", "minor"])

        assert code == ExitCodes.SUCCESS.value
        out = json.loads(capsys.readouterr().out)
        assert out == [
            {"include": "Newtonsoft.Json", "current_version": "12.0.1", "new_version": "12.0.3"},
            {"include": "Serilog", "current_version": "2.10.0", "new_version": "2.12.0"},
        ]

    @patch("nugbot.fetch_versions", side_effect=fake_fetch)
    def test_default_policy_is_patch(self, _mock_fetch, write_file, capsys):
        path = write_file("App.csproj", CSPROJ)

        assert run_main([path]) == ExitCodes.SUCCESS.value

        out = json.loads(capsys.readouterr().out)
        assert out == [{"include": "Newtonsoft.Json", "current_version": "12.0.1", "new_version": "12.0.3"}]

    @patch("nugbot.fetch_versions", side_effect=fake_fetch)
    def test_per_dependency_failures_are_logged_not_fatal(self, _mock_fetch, write_file, capsys):
        path = write_file("App.csproj", CSPROJ)

        run_main([path, "-u", "major"])

        err = capsys.readouterr().err
        assert "Skipping Broken" in err
        assert "Skipping Offline: registry returned HTTP 503" in err
        assert "2 of 4 package(s) could not be checked." in err

    @patch("nugbot.fetch_versions", return_value=["1.0.0"])
    def test_no_updates(self, _mock_fetch, write_file, capsys):
        path = write_file("packages.config", '<packages><package id="A" version="1.0.0" /></packages>')

        code = run_main([path, "--error-on-updates"])

        captured = capsys.readouterr()
        assert code == ExitCodes.SUCCESS.value
        assert captured.out == ""
        assert "No updates found" in captured.err

    @patch("nugbot.fetch_versions", side_effect=fake_fetch)
    def test_error_on_updates(self, _mock_fetch, write_file):
        path = write_file("App.csproj", CSPROJ)
        assert run_main([path, "--error-on-updates"]) == ExitCodes.UPDATES_AVAILABLE.value

    @patch("nugbot.fetch_versions", side_effect=fake_fetch)
    def test_csv_output_file(self, _mock_fetch, write_file, tmp_path, capsys):
        path = write_file("App.csproj", CSPROJ)
        out_path = tmp_path / "updates.csv"

        assert run_main([path, "-u", "major", "-o", str(out_path)]) == ExitCodes.SUCCESS.value

        assert capsys.readouterr().out == ""
        rows = list(csv.reader(out_path.open("r", encoding="utf-8")))
        assert rows == [
            ["include", "current_version", "new_version"],
            ["Newtonsoft.Json", "12.0.1", "13.0.1"],
            ["Serilog", "2.10.0", "3.1.1"],
        ]

    @patch("nugbot.fetch_versions")
    def test_missing_manifest(self, mock_fetch, tmp_path, capsys):
        code = run_main([str(tmp_path / "Nope.csproj")])
        assert code == ExitCodes.FILE_ERROR.value
        assert "File not found" in capsys.readouterr().err
        mock_fetch.assert_not_called()

    @patch("nugbot.fetch_versions")
    def test_unsupported_manifest_is_fatal(self, mock_fetch, write_file, capsys):
        path = write_file("requirements.txt", "requests==2.0\n")
        code = run_main([path])
        captured = capsys.readouterr()
        assert code == ExitCodes.FILE_ERROR.value
        assert captured.out == ""
        assert "unsupported manifest type" in captured.err
        mock_fetch.assert_not_called()

    @patch("nugbot.fetch_versions")
    def test_malformed_manifest_is_fatal(self, mock_fetch, write_file, capsys):
        path = write_file("App.csproj", "<Project><ItemGroup>")
        code = run_main([path])
        captured = capsys.readouterr()
        assert code == ExitCodes.FILE_ERROR.value
        assert captured.out == ""
        assert "Error parsing packages" in captured.err
        mock_fetch.assert_not_called()

    def test_invalid_update_type_in_config(self, write_file):
        manifest = write_file("App.csproj", CSPROJ)
        config = write_file("nugbot.yml", "update_type: everything\n")
        assert run_main([manifest, "-c", config]) == ExitCodes.USAGE_ERROR.value

    @patch("nugbot.fetch_versions", return_value=["1.0.0"])
    def test_json_logging(self, _mock_fetch, write_file, capsys):
        path = write_file("packages.config", '<packages><package id="A" version="1.0.0" /></packages>')

        run_main([path, "--log-json"])

        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.strip()]
        assert any(rec["msg"] == "No updates found" and rec["level"] == "INFO" for rec in lines)

    @patch("nugbot.fetch_versions", return_value=["1.0.0"])
    def test_logfile(self, _mock_fetch, write_file, tmp_path):
        path = write_file("packages.config", '<packages><package id="A" version="1.0.0" /></packages>')
        log_path = tmp_path / "nugbot.log"

        run_main([path, "--logfile", str(log_path)])

        assert "No updates found" in log_path.read_text(encoding="utf-8")


class TestRunUpdateChecker:

    def test_uses_injected_fetch(self, write_file):
        path = write_file("App.csproj", CSPROJ)
        updates = run_update_checker(path, UpdatePolicy.MAJOR, fetch=fake_fetch)
        assert [u.name for u in updates] == ["Newtonsoft.Json", "Serilog"]

    def test_manifest_errors_propagate(self, write_file):
        path = write_file("App.csproj", "not xml")
        with pytest.raises(MalformedManifest):
            run_update_checker(path, UpdatePolicy.PATCH, fetch=fake_fetch)


class TestExporters:

    DECISIONS = [
        UpdateDecision("Newtonsoft.Json", "12.0.1", "13.0.1"),
        UpdateDecision("NoCurrent", "", "1.0.0"),
    ]

    def test_export_json(self):
        stream = io.StringIO()
        export_json(self.DECISIONS, stream)
        assert json.loads(stream.getvalue()) == [
            {"include": "Newtonsoft.Json", "current_version": "12.0.1", "new_version": "13.0.1"},
            {"include": "NoCurrent", "new_version": "1.0.0"},
        ]
        assert stream.getvalue().startswith("[\n  {")

    def test_export_csv(self):
        stream = io.StringIO()
        export_csv(self.DECISIONS, stream)
        rows = list(csv.reader(io.StringIO(stream.getvalue())))
        assert rows[0] == ["include", "current_version", "new_version"]
        assert rows[2] == ["NoCurrent", "", "1.0.0"]
