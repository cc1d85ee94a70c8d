import json

import pytest

from inkmark.config import EditorSettings, ToolStyle, load_settings
from inkmark.core.annotations import AnnotationType


class TestEditorSettings:

    def test_default_tool_styles(self):
        settings = EditorSettings()
        assert settings.style_for(AnnotationType.FREEHAND) == ToolStyle("#ff0000", 2.0)
        assert settings.style_for("highlight") == ToolStyle("rgba(255, 255, 0, 0.4)", 20.0)
        assert settings.style_for(AnnotationType.RECTANGLE).color == "#3b82f6"

    def test_zoom_steps_are_clamped(self):
        settings = EditorSettings()
        assert settings.zoom_in(1.0) == 1.2
        assert settings.zoom_out(1.0) == 0.8
        assert settings.zoom_in(2.9) == 3.0
        assert settings.zoom_out(0.6) == 0.5

    def test_zoom_walk_stays_on_grid(self):
        settings = EditorSettings()
        zoom = 1.0
        for _ in range(20):
            zoom = settings.zoom_in(zoom)
        assert zoom == 3.0


class TestFromDict:

    def test_overrides_and_unknown_keys(self):
        settings = EditorSettings.from_dict({
            "text_color": "#333333",
            "base_font_size": 12,
            "theme": "dark",
            "tools": {"pencil": {"color": "#00ff00", "stroke_width": 4}},
        })
        assert settings.text_color == "#333333"
        assert settings.base_font_size == 12.0
        assert settings.style_for("pencil") == ToolStyle("#00ff00", 4.0)
        assert settings.style_for("rectangle").color == "#3b82f6"

    def test_bad_values_keep_defaults(self):
        settings = EditorSettings.from_dict({
            "text_color": "not-a-color",
            "max_zoom": "lots",
            "tools": {"pencil": {"color": "nope"}, "stamp": {"color": "#fff"}},
        })
        assert settings.text_color == "#000000"
        assert settings.max_zoom == 3.0
        assert settings.style_for("pencil").color == "#ff0000"

    def test_inconsistent_zoom_limits(self):
        settings = EditorSettings.from_dict({"min_zoom": 2.0, "max_zoom": 1.0})
        assert (settings.min_zoom, settings.max_zoom) == (0.5, 3.0)

    def test_tools_must_be_object(self):
        settings = EditorSettings.from_dict({"tools": ["pencil"]})
        assert settings.style_for("pencil").color == "#ff0000"


class TestLoadSettings:

    def test_missing_file(self, tmp_path):
        assert load_settings(tmp_path / "missing.json") == EditorSettings()

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_settings(path) == EditorSettings()

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_settings(path) == EditorSettings()

    def test_reads_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"export_suffix": "_marked"}), encoding="utf-8")
        assert load_settings(path).export_suffix == "_marked"

    def test_default_location(self, tmp_path):
        # XDG_CONFIG_HOME points into tmp_path for every test
        config_dir = tmp_path / "config" / "Inkmark"
        config_dir.mkdir(parents=True)
        (config_dir / "settings.json").write_text('{"zoom_step": 0.5}', encoding="utf-8")
        assert load_settings().zoom_step == pytest.approx(0.5)


class TestValidation:

    @pytest.mark.parametrize("key", ["zoom_step", "base_font_size"])
    @pytest.mark.parametrize("value", [0, -0.2])
    def test_non_positive_scalars_keep_defaults(self, key, value):
        settings = EditorSettings.from_dict({key: value})
        assert getattr(settings, key) == getattr(EditorSettings(), key)

    @pytest.mark.parametrize("width", [0, -3])
    def test_non_positive_stroke_width_is_ignored(self, width):
        settings = EditorSettings.from_dict({"tools": {"pencil": {"color": "#00ff00", "stroke_width": width}}})
        assert settings.style_for("pencil") == ToolStyle("#ff0000", 2.0)

    def test_zoom_buttons_still_move_after_bad_step(self):
        settings = EditorSettings.from_dict({"zoom_step": 0})
        assert settings.zoom_in(1.0) > 1.0
