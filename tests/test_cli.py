from pathlib import Path

from bs4 import BeautifulSoup
from typer.testing import CliRunner

from codelink.ui.cli import DEFAULT_MARKDOWN_EXTENSIONS, app
from codelink.ui.cli.state import get_cli_state
from codelink.version import get_version


def _make_project(root: Path) -> Path:
    (root / "src").mkdir()
    (root / "src" / "Program.cs").write_text("Console.WriteLine(42);\n", encoding="utf-8")
    (root / "src" / "app.csproj").write_text("<Project />", encoding="utf-8")
    (root / "docs").mkdir()
    document = root / "docs" / "index.md"
    document.write_text("# Demo\n\n```cs ../src/Program.cs\n```\n", encoding="utf-8")
    return document


def test_version_flag() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert get_version() in result.output


def test_list_extensions() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["--list-extensions"])

    assert result.exit_code == 0
    assert result.output.split() == DEFAULT_MARKDOWN_EXTENSIONS


def test_render_to_stdout(tmp_path: Path) -> None:
    document = _make_project(tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, ["render", str(document), "--root", str(tmp_path)])

    assert result.exit_code == 0, result.output
    code = BeautifulSoup(result.output, "html.parser").select_one("pre > code")
    assert code is not None
    assert code.get_text() == "Console.WriteLine(42);\n"
    assert code["data-trydotnet-session-id"] == "Run"


def test_render_to_file(tmp_path: Path) -> None:
    document = _make_project(tmp_path)
    target = tmp_path / "build" / "index.html"
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["render", str(document), "-r", str(tmp_path), "-o", str(target)],
    )

    assert result.exit_code == 0, result.output
    assert "data-trydotnet-package" in target.read_text(encoding="utf-8")


def test_render_with_config_file(tmp_path: Path) -> None:
    document = _make_project(tmp_path)
    config = tmp_path / "codelink.yml"
    config.write_text("codelink:\n  default_session: Demo\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["render", str(document), "--root", str(tmp_path), "--config", str(config)],
    )

    assert result.exit_code == 0, result.output
    assert 'data-trydotnet-session-id="Demo"' in result.output


def test_render_with_invalid_config(tmp_path: Path) -> None:
    document = _make_project(tmp_path)
    config = tmp_path / "codelink.yml"
    config.write_text("codelink: [\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["render", str(document), "-c", str(config)])

    assert result.exit_code == 1
    assert "Invalid YAML" in result.output


def test_render_can_disable_extensions(tmp_path: Path) -> None:
    document = tmp_path / "table.md"
    document.write_text("| a | b |\n|---|---|\n| 1 | 2 |\n", encoding="utf-8")
    runner = CliRunner()

    enabled = runner.invoke(app, ["render", str(document)])
    disabled = runner.invoke(app, ["render", str(document), "-d", "tables"])

    assert enabled.exit_code == 0
    assert "<table>" in enabled.output
    assert disabled.exit_code == 0
    assert "<table>" not in disabled.output


def test_render_reports_diagnostics(tmp_path: Path) -> None:
    document = tmp_path / "broken.md"
    document.write_text("```cs Missing.cs\n```\n", encoding="utf-8")
    runner = CliRunner()

    relaxed = runner.invoke(app, ["render", str(document)])
    strict = runner.invoke(app, ["render", str(document), "--strict"])

    assert relaxed.exit_code == 0
    assert "File not found: ./Missing.cs" in relaxed.output
    assert strict.exit_code == 1


def test_render_rejects_documents_outside_the_root(tmp_path: Path) -> None:
    document = _make_project(tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, ["render", str(document), "--root", str(tmp_path / "src")])

    assert result.exit_code == 2


def test_publish_command(tmp_path: Path) -> None:
    _make_project(tmp_path)
    (tmp_path / "docs" / "broken.md").write_text("```cs Missing.cs\n```\n", encoding="utf-8")
    output = tmp_path / "site"
    runner = CliRunner()

    result = runner.invoke(app, ["publish", str(tmp_path), str(output), "--jobs", "2"])

    assert result.exit_code == 0, result.output
    assert "Published 2 page(s)" in result.output
    assert "Code link diagnostics" in result.output
    assert (output / "docs" / "index.html").exists()
    assert (output / "src" / "Program.cs").exists()


def test_publish_command_strict_without_assets(tmp_path: Path) -> None:
    _make_project(tmp_path)
    (tmp_path / "docs" / "broken.md").write_text("```cs Missing.cs\n```\n", encoding="utf-8")
    output = tmp_path / "site"
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["publish", str(tmp_path), str(output), "--no-assets", "--no-summary", "--strict"],
    )

    assert result.exit_code == 1
    assert "Published" not in result.output
    assert not (output / "src").exists()
    assert (output / "docs" / "broken.html").exists()


def test_flags_work_without_a_command() -> None:
    runner = CliRunner()

    version = runner.invoke(app, ["--version"])
    listing = runner.invoke(app, ["-v", "--list-extensions"])

    assert version.exit_code == 0
    assert "Missing command" not in version.output
    assert listing.exit_code == 0
    assert "pymdownx.superfences" in listing.output


def test_global_options_alone_print_help() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["--debug"])

    assert result.exit_code == 0
    assert "render" in result.output
    assert "publish" in result.output


def test_publish_summary_is_built_from_recorded_events(tmp_path: Path) -> None:
    _make_project(tmp_path)
    (tmp_path / "docs" / "broken.md").write_text("```cs Missing.cs\n```\n", encoding="utf-8")
    output = tmp_path / "site"
    runner = CliRunner()

    result = runner.invoke(app, ["publish", str(tmp_path), str(output), "--no-assets"])

    assert result.exit_code == 0, result.output
    assert "Published 2 page(s), copied 0 asset(s)." in result.output
    assert "FileNotFound" in result.output
    assert get_cli_state().events == {}


def test_publish_verbose_reports_each_page(tmp_path: Path) -> None:
    _make_project(tmp_path)
    output = tmp_path / "site"
    runner = CliRunner()

    quiet = runner.invoke(app, ["publish", str(tmp_path), str(output), "--no-summary"])
    verbose = runner.invoke(app, ["-v", "publish", str(tmp_path), str(output), "--no-summary"])

    assert quiet.exit_code == 0
    assert "Wrote" not in quiet.output
    assert verbose.exit_code == 0
    assert "Wrote" in verbose.output
    assert "index.html" in verbose.output


def test_publish_with_template_dir(tmp_path: Path) -> None:
    _make_project(tmp_path)
    templates = tmp_path.parent / f"{tmp_path.name}-templates"
    templates.mkdir()
    (templates / "page.html").write_text("<article>{{ body | safe }}</article>\n", encoding="utf-8")
    output = tmp_path / "site"
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["publish", str(tmp_path), str(output), "--template-dir", str(templates), "--no-summary"],
    )

    assert result.exit_code == 0, result.output
    page = (output / "docs" / "index.html").read_text(encoding="utf-8")
    assert page.startswith("<article><h1")
