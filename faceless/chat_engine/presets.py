"""
faceless/chat_engine/presets.py
Chat layout presets: pixel constants of the reference canvas for each
supported messenger look, plus the render template bound to it.
"""
from dataclasses import dataclass, replace
from typing import List

from faceless.core.config import CHAT_PRESETS, get_template_id


class InvalidPresetError(ValueError):
    pass


class UnknownPresetError(KeyError):
    pass


@dataclass(frozen=True)
class LayoutPreset:
    chat_top: float
    chat_bottom: float
    chars_per_line: int
    line_height: float
    bubble_pad: float
    image_bubble_height: float
    gap_y: float
    name: str = "custom"
    template_id: str = ""

    @property
    def chat_height(self) -> float:
        return self.chat_bottom - self.chat_top

    def validate(self) -> "LayoutPreset":
        for field in (
            "chat_top", "chat_bottom", "chars_per_line", "line_height",
            "bubble_pad", "image_bubble_height", "gap_y",
        ):
            value = getattr(self, field)
            if not isinstance(value, (int, float)) or value <= 0:
                raise InvalidPresetError(f"Preset '{self.name}': {field} must be positive, got {value!r}")
        if self.chat_bottom <= self.chat_top:
            raise InvalidPresetError(f"Preset '{self.name}': chat_bottom must be below chat_top")
        return self


def preset_names() -> List[str]:
    return sorted(CHAT_PRESETS.keys())


def get_preset(name: str) -> LayoutPreset:
    key = (name or "iphone").strip().lower()
    raw = CHAT_PRESETS.get(key)
    if not raw:
        raise UnknownPresetError(key)
    preset = LayoutPreset(name=key, **raw)
    return replace(preset, template_id=get_template_id(key)).validate()
