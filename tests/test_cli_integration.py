import os
import subprocess
import sys
from pathlib import Path

from projref import cli
from projref.msbuild import ProjectDocument

PROJECT = "<Project>\n</Project>\n"


def _layout(tmp_path) -> Path:
    root = tmp_path.resolve()
    for name in ("App", "Lib"):
        (root / name).mkdir()
        (root / name / f"{name}.csproj").write_text(PROJECT)
    return root


def test_parse_config_splits_on_separator():
    config = cli.parse_config(
        ["App.csproj", "-f", "net8.0", "--force", "--", "A.csproj", "--not-an-option"]
    )

    assert config.project == "App.csproj"
    assert config.framework == "net8.0"
    assert config.force is True
    assert config.references == ["A.csproj", "--not-an-option"]


def test_parse_config_treats_extra_positionals_as_references():
    config = cli.parse_config(["App.csproj", "Extra.csproj", "--", "A.csproj"])

    assert config.project == "App.csproj"
    assert config.references == ["Extra.csproj", "A.csproj"]
    assert config.framework is None
    assert config.force is False


def test_parse_config_without_project_or_separator():
    config = cli.parse_config(["-v", "-v"])

    assert config.project is None
    assert config.references == []
    assert config.verbosity == 2


def test_main_adds_reference_and_returns_zero(tmp_path, monkeypatch):
    root = _layout(tmp_path)
    monkeypatch.chdir(root / "App")

    exit_code = cli.main(["--", "../Lib/Lib.csproj"])

    assert exit_code == 0
    project = ProjectDocument.load(root / "App" / "App.csproj")
    assert project.references() == ["..\\Lib\\Lib.csproj"]


def test_main_reports_errors_with_help_and_exit_code_one(tmp_path, capsys):
    root = _layout(tmp_path)

    exit_code = cli.main([str(root / "App" / "App.csproj"), "--", str(root / "Missing.csproj")])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert captured.err.startswith("dotnet add p2p: error: Reference `")
    assert "does not exist." in captured.err
    assert "usage: dotnet add p2p" in captured.out
    assert (root / "App" / "App.csproj").read_text() == PROJECT


def test_main_requires_references(tmp_path, capsys):
    root = _layout(tmp_path)

    exit_code = cli.main([str(root / "App")])

    assert exit_code == 1
    assert "You must specify at least one reference to add." in capsys.readouterr().err


def test_main_rejects_empty_project_argument(capsys):
    exit_code = cli.main(["", "--", "Lib.csproj"])

    assert exit_code == 1
    assert "Required argument <Project> was not passed." in capsys.readouterr().err


def test_cli_module_runs_in_subprocess(tmp_path):
    """
    Run the CLI as a module against real files and check the exit code
    and the written project.
    """

    root = _layout(tmp_path)
    project_root = Path(__file__).resolve().parents[1]
    env = os.environ.copy()
    env["PYTHONPATH"] = str(project_root)

    completed = subprocess.run(
        [
            sys.executable,
            "-m",
            "projref.cli",
            "-f",
            "net8.0",
            "--",
            str(root / "Lib" / "Lib.csproj"),
        ],
        cwd=str(root / "App"),
        env=env,
        text=True,
        capture_output=True,
        check=False,
    )

    assert completed.returncode == 0, completed.stderr
    assert "added to the project." in completed.stdout
    project = ProjectDocument.load(root / "App" / "App.csproj")
    assert project.references(framework="net8.0") == ["..\\Lib\\Lib.csproj"]
    assert project.references() == []


def test_main_reports_usage_errors_with_exit_code_one(capsys):
    exit_code = cli.main(["-f", "--", "App.csproj"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert captured.err.startswith("dotnet add p2p: error: argument -f/--framework")
    assert "usage: dotnet add p2p" in captured.out
