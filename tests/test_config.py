import json

import pytest
from ruamel.yaml import YAML

from composcript.core.config import BuildConfig, load_config, save_config
from composcript.core.errors import ConfigError


def test_load_from_yaml(tmp_path):
    (tmp_path / "composcript.yaml").write_text(
        "# project settings\ncomponents: ./src/components\non_error: skip\ndebounce: 1\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.components_dir == "./src/components"
    assert config.on_error == "skip"
    assert config.debounce_seconds == 1.0
    assert config.output_name == "compiled.js"
    assert config.output_path == (tmp_path / "src" / "components" / "compiled.js").resolve()


def test_load_from_package_json(tmp_path):
    package = {"name": "site", "composcript": {"components": "./public/components", "scss": "./styles"}}
    (tmp_path / "package.json").write_text(json.dumps(package), encoding="utf-8")
    config = load_config(tmp_path)
    assert config.components_dir == "./public/components"
    assert config.extension == ".jsx"


def test_yaml_wins_over_package_json(tmp_path):
    (tmp_path / "composcript.yaml").write_text("components: yaml-dir\n", encoding="utf-8")
    (tmp_path / "package.json").write_text(json.dumps({"composcript": {"components": "json-dir"}}))
    assert load_config(tmp_path).components_dir == "yaml-dir"


def test_package_json_without_section_is_not_config(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"name": "site"}))
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_missing_config_raises(tmp_path):
    with pytest.raises(ConfigError) as info:
        load_config(tmp_path)
    assert "composcript init" in str(info.value)


def test_invalid_policy_raises(tmp_path):
    (tmp_path / "composcript.yaml").write_text("on_error: retry\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_extension_gets_leading_dot(tmp_path):
    assert BuildConfig(project_root=tmp_path, extension="jsx").extension == ".jsx"


def test_save_keeps_existing_comments(tmp_path):
    path = tmp_path / "composcript.yaml"
    path.write_text("# keep me\ncomponents: old\n", encoding="utf-8")

    save_config(BuildConfig(project_root=tmp_path, components_dir="new"))

    text = path.read_text(encoding="utf-8")
    assert "# keep me" in text
    data = YAML(typ="safe").load(text)
    assert data["components"] == "new"
    assert load_config(tmp_path).components_dir == "new"
