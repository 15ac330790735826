import pytest

from yamlanalyzer.core.config import DEFAULT_CONFIG_NAME, AnalyzerSettings, ConfigError


def test_defaults():
    settings = AnalyzerSettings()
    assert settings.tab_width == 2
    assert settings.max_value_length == 120
    assert settings.fix_enabled("missing_colon")
    assert not settings.fix_enabled("indent_smoothing")
    assert "containers" in settings.list_keys


def test_from_mapping_merges_over_defaults():
    settings = AnalyzerSettings.from_mapping({
        "fixes": {"indent_smoothing": True},
        "resources": {"cpu_limit": 1, "memory_limit": "1Gi"},
        "max_value_length": "80",
        "list_keys": ["containers", "sidecars"],
    })

    assert settings.fix_enabled("indent_smoothing")
    assert settings.fix_enabled("tab_expansion")
    assert settings.cpu_limit == "1"
    assert settings.memory_limit == "1Gi"
    assert settings.max_value_length == 80
    assert settings.list_keys == frozenset({"containers", "sidecars"})


@pytest.mark.parametrize("data", [
    {"colour": "blue"},
    {"fixes": {"spellcheck": True}},
    {"fixes": ["tab_expansion"]},
    {"resources": {"gpu_limit": "1"}},
    {"tab_width": "wide"},
    {"tab_width": 0},
    {"tab_width": -2},
    {"max_value_length": 0},
    {"tab_width": True},
    {"fixes": {"missing_dash": "false"}},
    {"fixes": {"missing_dash": 0}},
    {"list_keys": "containers"},
    {"list_keys": None},
    {"list_keys": ["containers", 3]},
    ["not", "a", "mapping"],
])
def test_invalid_settings_are_rejected(data):
    with pytest.raises(ConfigError):
        AnalyzerSettings.from_mapping(data)


def test_load_and_discover(tmp_path):
    (tmp_path / DEFAULT_CONFIG_NAME).write_text("default_image_tag: '2.0'\nfixes:\n  missing_dash: false\n")

    settings = AnalyzerSettings.discover(tmp_path)
    assert settings.default_image_tag == "2.0"
    assert not settings.fix_enabled("missing_dash")


def test_discover_without_file_gives_defaults(tmp_path):
    assert AnalyzerSettings.discover(tmp_path) == AnalyzerSettings()


def test_unreadable_settings_file(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("fixes: [unclosed\n")
    with pytest.raises(ConfigError):
        AnalyzerSettings.load(broken)

    with pytest.raises(ConfigError):
        AnalyzerSettings.load(tmp_path / "missing.yaml")


def test_quoted_false_in_settings_file_is_rejected(tmp_path):
    config = tmp_path / DEFAULT_CONFIG_NAME
    config.write_text("fixes:\n  missing_dash: 'false'\n")
    with pytest.raises(ConfigError):
        AnalyzerSettings.load(config)
