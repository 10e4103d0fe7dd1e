from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mdsite import __version__
from mdsite.cli import EXIT_FATAL, app

SiteRoot = Callable[[dict[str, str]], Path]

pytestmark = pytest.mark.usefixtures("isolate_logging")


def test_cli_shows_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "build" in result.stdout
    assert "check" in result.stdout


def test_cli_version_command_and_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"mdsite version {__version__}"

    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_build_clean_tree_exits_zero(site_root: SiteRoot, tmp_path: Path) -> None:
    root = site_root(
        {
            "README.md": "# Home\nRead the [guide](Guide.md).\n",
            "Guide.md": "# Guide\nSee [below](#section-one) or go [home](README.md).\n## Section One\n",
        }
    )
    out = tmp_path / "site"

    result = CliRunner().invoke(app, ["build", str(root), str(out), "--no-progress"])

    assert result.exit_code == 0, result.output
    assert "0 unresolved link(s), 0 orphan(s), 0 duplicate anchor(s)" in result.stdout
    assert "Wrote 2 page(s)" in result.stdout
    assert (out / "README.html").exists()
    assert (out / "Guide.html").exists()
    assert (out / "report.txt").read_text(encoding="utf-8") == ""


def test_build_unresolved_link_exits_one(site_root: SiteRoot, tmp_path: Path) -> None:
    root = site_root({"README.md": "# Home\n\n[missing](Missing.md)\n"})
    out = tmp_path / "site"

    result = CliRunner().invoke(app, ["build", str(root), str(out), "--no-progress"])

    assert result.exit_code == 1
    assert "README.md:3: error: unresolved link 'Missing.md' (missing document)" in result.stdout
    assert "Build failed" in result.stdout
    assert (out / "README.html").exists()


def test_build_orphan_is_warning(site_root: SiteRoot, tmp_path: Path) -> None:
    root = site_root({"README.md": "# Home\n", "Extra.md": "# Extra\n"})

    result = CliRunner().invoke(app, ["build", str(root), str(tmp_path / "site"), "--no-progress"])

    assert result.exit_code == 0
    assert "Extra.md:1: warning: orphan document (not reachable from README.md)" in result.stdout


def test_build_missing_root_is_fatal(tmp_path: Path) -> None:
    out = tmp_path / "site"
    result = CliRunner().invoke(app, ["build", str(tmp_path / "nope"), str(out), "--no-progress"])

    assert result.exit_code == EXIT_FATAL
    assert "Error:" in result.output
    assert not out.exists()


def test_build_refuses_source_as_output(site_root: SiteRoot) -> None:
    root = site_root({"README.md": "# Home\n"})

    result = CliRunner().invoke(app, ["build", str(root), str(root), "--no-progress"])

    assert result.exit_code == EXIT_FATAL
    assert (root / "README.md").read_text(encoding="utf-8") == "# Home\n"


def test_build_missing_index_is_fatal(site_root: SiteRoot, tmp_path: Path) -> None:
    root = site_root({"Guide.md": "# Guide\n"})

    result = CliRunner().invoke(app, ["build", str(root), str(tmp_path / "site"), "--no-progress"])

    assert result.exit_code == EXIT_FATAL
    assert "README.md" in result.output


def test_invalid_path_case_is_rejected(site_root: SiteRoot) -> None:
    root = site_root({"README.md": "# Home\n"})

    result = CliRunner().invoke(app, ["check", str(root), "--path-case", "upper", "--no-progress"])

    assert result.exit_code == EXIT_FATAL
    assert "Invalid path case" in result.output


def test_check_reports_without_writing(site_root: SiteRoot) -> None:
    root = site_root({"README.md": "[g](guide.md)\n", "Guide.md": "# Guide\n"})

    result = CliRunner().invoke(app, ["check", str(root), "--no-progress"])
    assert result.exit_code == 1
    assert "unresolved link 'guide.md'" in result.stdout

    result = CliRunner().invoke(
        app, ["check", str(root), "--path-case", "insensitive", "--no-progress"]
    )
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in root.iterdir()) == ["Guide.md", "README.md"]


def test_check_custom_index(site_root: SiteRoot) -> None:
    root = site_root({"index.md": "[g](Guide.md)\n", "Guide.md": "# Guide\n"})

    result = CliRunner().invoke(app, ["check", str(root), "--index", "index.md", "--no-progress"])

    assert result.exit_code == 0, result.output
    assert "0 orphan(s)" in result.stdout


def test_build_with_workers(site_root: SiteRoot, tmp_path: Path) -> None:
    files = {f"p{i}.md": f"# Page {i}\n" for i in range(6)}
    files["README.md"] = "".join(f"[p{i}](p{i}.md)\n" for i in range(6))
    root = site_root(files)

    result = CliRunner().invoke(
        app, ["build", str(root), str(tmp_path / "site"), "--workers", "3", "--no-progress"]
    )

    assert result.exit_code == 0, result.output
    assert "Wrote 7 page(s)" in result.stdout
