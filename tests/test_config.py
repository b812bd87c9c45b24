from pathlib import Path

import pytest

from codelink.core.config import CodeLinkConfig, PublishConfig, build_config, load_config
from codelink.core.exceptions import ConfigurationError


def test_defaults() -> None:
    config = PublishConfig()

    assert config.jobs == 4
    assert config.copy_assets is True
    assert config.template_dir is None
    assert config.codelink.languages == ["cs", "csharp", "c#"]
    assert config.codelink.project_suffixes == [".csproj"]
    assert config.codelink.default_session == "Run"
    assert config.codelink.attribute_prefix == "data-trydotnet"


def test_codelink_settings_are_normalised() -> None:
    config = CodeLinkConfig(
        languages=[" CS ", "VB", ""],
        project_suffixes=["fsproj", ".vbproj"],
        default_session="  Main ",
    )

    assert config.languages == ["cs", "vb"]
    assert config.project_suffixes == [".fsproj", ".vbproj"]
    assert config.default_session == "Main"


@pytest.mark.parametrize(
    "payload",
    [
        {"languages": []},
        {"default_session": "   "},
        {"attribute_prefix": ""},
        {"unknown": True},
    ],
)
def test_invalid_codelink_settings(payload: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError):
        build_config({"codelink": payload})


def test_load_config_resolves_directories(tmp_path: Path) -> None:
    config_file = tmp_path / "codelink.yml"
    config_file.write_text(
        "source_dir: docs\n"
        "output_dir: /srv/site\n"
        "jobs: 2\n"
        "markdown_extensions: [pymdownx.details]\n"
        "template_dir: theme\n"
        "codelink:\n"
        "  default_session: Demo\n",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.source_dir == tmp_path / "docs"
    assert config.output_dir == Path("/srv/site")
    assert config.jobs == 2
    assert config.markdown_extensions == ["pymdownx.details"]
    assert config.template_dir == tmp_path / "theme"
    assert config.codelink.default_session == "Demo"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "codelink.yml"
    config_file.write_text("", encoding="utf-8")

    config = load_config(config_file)

    assert config.output_dir == tmp_path / "_site"
    assert config.codelink == CodeLinkConfig()


@pytest.mark.parametrize(
    ("content", "fragment"),
    [
        ("jobs: [\n", "Invalid YAML"),
        ("- a\n- b\n", "mapping"),
        ("jobs: 0\n", "Invalid configuration"),
    ],
)
def test_load_config_errors(tmp_path: Path, content: str, fragment: str) -> None:
    config_file = tmp_path / "codelink.yml"
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        load_config(config_file)

    assert fragment in str(excinfo.value)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unable to read"):
        load_config(tmp_path / "absent.yml")
