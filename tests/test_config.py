from pathlib import Path

from homedash.config import AppConfig


def test_config_merge_file_json(tmp_path: Path) -> None:
    config_file = tmp_path / "homedash.config.json"
    config_file.write_text(
        """
{
  "column_separator": " | ",
  "mag_mode": "yes",
  "default_tab": "Vendors",
  "grid_width": 90,
  "show_deleted": true,
  "log_level": "debug"
}
""".strip(),
        encoding="utf-8",
    )

    merged = AppConfig().merge_file(config_file)
    assert merged.column_separator == " | "
    assert merged.collapsed_separator == " ⋯ "
    assert merged.mag_mode is True
    assert merged.default_tab == "vendors"
    assert merged.grid_width == 90
    assert merged.show_deleted is True
    assert merged.log_level == "DEBUG"
    assert merged.config_source == str(config_file)


def test_config_merge_file_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "homedash.yaml"
    config_file.write_text("seed_demo_data: false\ngrid_width: 5\ndefault_tab: garage\n", encoding="utf-8")

    merged = AppConfig().merge_file(config_file)
    assert merged.seed_demo_data is False
    assert merged.grid_width == 20
    assert merged.default_tab == "projects"


def test_config_merge_file_invalid_json_falls_back(tmp_path: Path) -> None:
    config_file = tmp_path / "homedash.config.json"
    config_file.write_text("{ this-is: bad json", encoding="utf-8")

    defaults = AppConfig()
    merged = defaults.merge_file(config_file)
    assert merged == defaults


def test_config_merge_file_empty_separator_keeps_default(tmp_path: Path) -> None:
    config_file = tmp_path / "homedash.config.json"
    config_file.write_text('{"column_separator": "", "log_level": "loud"}', encoding="utf-8")

    merged = AppConfig().merge_file(config_file)
    assert merged.column_separator == " │ "
    assert merged.log_level == "INFO"


def test_config_from_env_parses_flags(monkeypatch) -> None:
    monkeypatch.setenv("HD_MAG_MODE", "on")
    monkeypatch.setenv("HD_SEED_DEMO_DATA", "0")
    monkeypatch.setenv("HD_DEFAULT_TAB", "quotes")
    monkeypatch.setenv("HD_GRID_WIDTH", "3")
    monkeypatch.setenv("HD_CONFIG_PATH", "non-existent-config-file.json")

    config = AppConfig.from_env()
    assert config.mag_mode is True
    assert config.seed_demo_data is False
    assert config.default_tab == "quotes"
    assert config.grid_width == 20
    assert config.config_source == "defaults/env"


def test_config_from_env_ignores_bad_values(monkeypatch) -> None:
    monkeypatch.setenv("HD_GRID_WIDTH", "wide")
    monkeypatch.setenv("HD_DEFAULT_TAB", "garage")
    monkeypatch.setenv("HD_CONFIG_PATH", "non-existent-config-file.json")

    config = AppConfig.from_env()
    assert config.grid_width == 120
    assert config.default_tab == "projects"
