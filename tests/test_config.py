import logging

import pytest

from hovercard.config import HoverOptions, load_hover_options
from hovercard.constants import HOUR


def test_defaults_match_options_screen():
    options = HoverOptions()

    assert options.require_direct_link is True
    assert options.hover_delay_ms == 800
    assert options.fade_delay_ms == 200
    assert options.fade_speed == pytest.approx(0.7)
    assert options.width == 450
    assert options.cache_ttl == HOUR
    assert options.open_delay == pytest.approx(0.8)
    assert options.fade_delay == pytest.approx(0.2)


def test_from_mapping_coerces_strings_and_ignores_garbage():
    options = HoverOptions.from_mapping(
        {
            "hover_delay": "250",
            "fade_delay": "abc",
            "fade_speed": "0.3",
            "width": -20,
            "require_direct_link": "no",
            "unknown": 1,
        }
    )

    assert options.hover_delay_ms == 250
    assert options.fade_delay_ms == 200
    assert options.fade_speed == pytest.approx(0.3)
    assert options.width == 450
    assert options.require_direct_link is False


def test_zero_cache_bound_means_unbounded():
    assert HoverOptions.from_mapping({"cache_max_entries": 0}).cache_max_entries is None
    assert HoverOptions.from_mapping({"cache_max_entries": "16"}).cache_max_entries == 16


def test_with_overrides_rejects_unknown_names():
    options = HoverOptions().with_overrides(hover_delay_ms=0)
    assert options.open_delay == 0.0
    with pytest.raises(TypeError):
        HoverOptions().with_overrides(delay=1)


def test_load_from_pyproject_tool_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.hovercard]\nhover_delay = 500\nwidth = 300\n',
        encoding="utf-8",
    )

    options = load_hover_options(tmp_path)

    assert options.hover_delay_ms == 500
    assert options.width == 300
    assert options.fade_delay_ms == 200


def test_load_from_plain_file_with_section(tmp_path):
    path = tmp_path / "hover.toml"
    path.write_text("[hovercard]\nfade_delay = 50\n", encoding="utf-8")

    assert load_hover_options(path).fade_delay_ms == 50


def test_load_from_plain_file_top_level(tmp_path):
    path = tmp_path / "hover.toml"
    path.write_text("require_direct_link = false\n", encoding="utf-8")

    assert load_hover_options(path).require_direct_link is False


def test_missing_or_malformed_files_fall_back_to_defaults(tmp_path, caplog):
    assert load_hover_options(tmp_path / "absent.toml") == HoverOptions()
    assert load_hover_options(None) == HoverOptions()

    broken = tmp_path / "broken.toml"
    broken.write_text("hover_delay = [\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="hovercard.config"):
        assert load_hover_options(broken) == HoverOptions()
    assert "malformed" in caplog.text
