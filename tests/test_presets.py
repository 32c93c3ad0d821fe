import pytest

from faceless.chat_engine.presets import InvalidPresetError, LayoutPreset, UnknownPresetError, get_preset, preset_names


def test_known_presets():
    assert preset_names() == ["instagram", "iphone", "whatsapp"]


def test_get_preset_reads_constants_and_template(monkeypatch):
    monkeypatch.setenv("CREATO_CHAT_TEMPLATE_WHATSAPP", " tpl-wa ")
    preset = get_preset("WhatsApp")
    assert preset.name == "whatsapp"
    assert preset.chars_per_line == 26
    assert preset.gap_y == 16
    assert preset.chat_height == 660
    assert preset.template_id == "tpl-wa"


def test_get_preset_defaults_to_iphone(monkeypatch):
    monkeypatch.delenv("CREATO_CHAT_TEMPLATE_IPHONE", raising=False)
    preset = get_preset("")
    assert preset.name == "iphone"
    assert preset.template_id == ""


def test_unknown_preset():
    with pytest.raises(UnknownPresetError):
        get_preset("telegram")


def test_inverted_region_rejected():
    preset = LayoutPreset(
        chat_top=900, chat_bottom=300, chars_per_line=22, line_height=44,
        bubble_pad=44, image_bubble_height=260, gap_y=18,
    )
    with pytest.raises(InvalidPresetError):
        preset.validate()
