"""
Tests for environment-driven settings
"""

import warnings

import pytest

from docraster.config import Settings


class TestSettings:
    """Settings loaded from DOCRASTER_* variables"""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        current = Settings()
        assert current.skew.ink_threshold == 140.0
        assert current.skew.top_lines == 20
        assert current.raster.background == "#FFFFFFFF"
        assert current.preprocessing.source_dpi == 300

    def test_nested_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DOCRASTER_SKEW__TOP_LINES", "5")
        monkeypatch.setenv("DOCRASTER_RASTER__BACKGROUND", "#FF000000")
        monkeypatch.setenv("DOCRASTER_PREPROCESSING__BORDER_WIDTH", "8")

        current = Settings()

        assert current.skew.top_lines == 5
        assert current.raster.background == "#FF000000"
        assert current.preprocessing.border_width == 8

    def test_unknown_variables_ignored(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("DOCRASTER_UNUSED=1\nDOCRASTER_SKEW__ANGLE_STEP=0.5\n")

        assert Settings().skew.angle_step == 0.5

    def test_invalid_value_rejected(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DOCRASTER_SKEW__TOP_LINES", "0")
        with pytest.raises(ValueError):
            Settings()

    def test_instantiation_emits_no_deprecation_warning(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            Settings()
