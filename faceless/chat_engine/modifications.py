"""
faceless/chat_engine/modifications.py
Turns a LayoutResult into the flat key/value modification map the chat render
templates expect. Each template has a fixed pool of Msg{i}_* slots; every slot
is cleared first so unused ones stay hidden.
"""
from typing import Any, Dict, Mapping, Optional

from faceless.chat_engine.layout import LayoutResult, Placement
from faceless.chat_engine.presets import LayoutPreset

BUBBLE_ELEMENTS = ("Me_Text", "Them_Text", "Me_Image", "Them_Image")


def _secs(value: float) -> float:
    return round(float(value), 3)


def clear_slots(preset: LayoutPreset, slot_capacity: int) -> Dict[str, Any]:
    mods: Dict[str, Any] = {}
    for i in range(1, slot_capacity + 1):
        mods[f"Msg{i}_Group.start"] = 0
        mods[f"Msg{i}_Group.duration"] = 0
        mods[f"Msg{i}_Group.y"] = preset.chat_top
        for element in BUBBLE_ELEMENTS:
            mods[f"Msg{i}_{element}.visible"] = False
            if element.endswith("Text"):
                mods[f"Msg{i}_{element}.text"] = ""
            else:
                mods[f"Msg{i}_{element}.source"] = ""
        mods[f"Msg{i}_Audio.start"] = 0
        mods[f"Msg{i}_Audio.duration"] = 0
        mods[f"Msg{i}_Audio.source"] = ""
    return mods


def bubble_element(placement: Placement) -> str:
    who = "Them" if placement.message.sender == "them" else "Me"
    what = "Image" if placement.message.is_image else "Text"
    return f"{who}_{what}"


def slot_modifications(placement: Placement, audio_url: str = "") -> Dict[str, Any]:
    if not placement.finalized:
        raise ValueError(f"Slot {placement.slot_index} has not been finalized by a page cut")

    i = placement.slot_index
    element = bubble_element(placement)
    mods: Dict[str, Any] = {
        f"Msg{i}_Group.start": _secs(placement.start_time),
        f"Msg{i}_Group.duration": _secs(placement.duration_seconds),
        f"Msg{i}_Group.y": placement.vertical_offset,
        f"Msg{i}_{element}.visible": True,
        f"Msg{i}_Audio.start": _secs(placement.start_time),
        # Audio ends with its bubble at the page cut.
        f"Msg{i}_Audio.duration": _secs(placement.duration_seconds),
        f"Msg{i}_Audio.source": audio_url or "",
    }
    if placement.message.is_image:
        mods[f"Msg{i}_{element}.source"] = placement.message.image_url
    else:
        mods[f"Msg{i}_{element}.text"] = placement.message.text
    return mods


def build_modifications(
    result: LayoutResult,
    preset: LayoutPreset,
    slot_capacity: int,
    audio_urls: Optional[Mapping[int, str]] = None,
    receiver: Optional[Mapping[str, Any]] = None,
    background: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    receiver = receiver or {}
    background = background or {}
    audio_urls = audio_urls or {}

    mods: Dict[str, Any] = {
        "hdr_name": str(receiver.get("name") or "Unknown"),
        "hdr_avatar.source": str(receiver.get("avatarUrl") or ""),
        "bg_video.source": str(background.get("url") or ""),
    }
    mods.update(clear_slots(preset, slot_capacity))
    for placement in result.placements:
        mods.update(slot_modifications(placement, audio_urls.get(placement.slot_index, "")))
    return mods
