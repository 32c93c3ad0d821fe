"""
faceless/chat_engine/layout.py
Chat timeline layout: assigns each message a render slot, a start time and a
vertical position inside the chat region, hard-cutting the visible page when
the next bubble would overflow it.

Usage:
    from faceless.chat_engine.layout import layout

Pure computation, no I/O. Timestamps are fixed here before any speech is
synthesized, so a request can be rejected before anything is paid for.
"""
import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from faceless.chat_engine.presets import LayoutPreset
from faceless.core.config import get_speech_pacing_overrides


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class LayoutError(ValueError):
    """Precondition failure: the whole layout is rejected."""


class NoMessagesError(LayoutError):
    def __init__(self):
        super().__init__("At least one message is required.")


class MissingVoiceIdError(LayoutError):
    def __init__(self, sender: str):
        self.sender = sender
        super().__init__(f"No voice id configured for sender '{sender}'.")


class InvalidLayoutError(LayoutError):
    pass


# ---------------------------------------------------------------------------
# Input / tuning types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Message:
    sender: str = "me"       # "me" | "them"
    type: str = "text"       # "text" | "image"
    text: str = ""
    image_url: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Message":
        raw = raw or {}
        return cls(
            sender="them" if raw.get("sender") == "them" else "me",
            type="image" if raw.get("type") == "image" else "text",
            text=str(raw.get("text") or ""),
            image_url=str(raw.get("imageUrl") or raw.get("image_url") or ""),
        )

    @property
    def is_image(self) -> bool:
        return self.type == "image"


@dataclass(frozen=True)
class SpeechPacing:
    words_per_second: float = 2.7
    pad_seconds: float = 0.12
    floor_seconds: float = 0.45      # minimum audible cue
    gap_seconds: float = 0.12        # pause between consecutive messages
    image_phrase: str = "Sent a photo."

    def validate(self) -> "SpeechPacing":
        if not self.words_per_second or self.words_per_second <= 0:
            raise InvalidLayoutError(f"words_per_second must be positive, got {self.words_per_second!r}")
        if not self.floor_seconds or self.floor_seconds <= 0:
            raise InvalidLayoutError(f"floor_seconds must be positive, got {self.floor_seconds!r}")
        if self.pad_seconds < 0 or self.gap_seconds < 0:
            raise InvalidLayoutError("pad_seconds and gap_seconds must not be negative")
        return self

    @classmethod
    def from_env(cls) -> "SpeechPacing":
        return replace(cls(), **get_speech_pacing_overrides())


DEFAULT_PACING = SpeechPacing()


# ---------------------------------------------------------------------------
# Estimators
# ---------------------------------------------------------------------------

def count_words(text: str) -> int:
    return len(re.findall(r"\S+", str(text or "")))


def spoken_text(message: Message, pacing: SpeechPacing = DEFAULT_PACING) -> str:
    if message.is_image:
        return pacing.image_phrase
    return message.text.strip()


def estimate_line_seconds(text: str, pacing: SpeechPacing = DEFAULT_PACING) -> float:
    words = count_words(text)
    return max(pacing.floor_seconds, words / pacing.words_per_second + pacing.pad_seconds)


def estimate_bubble_height(message: Message, preset: LayoutPreset) -> float:
    if message.is_image:
        return preset.image_bubble_height
    lines = max(1, math.ceil(len(message.text) / preset.chars_per_line))
    return preset.bubble_pad + lines * preset.line_height


# ---------------------------------------------------------------------------
# Placements and page groups
# ---------------------------------------------------------------------------

@dataclass
class Placement:
    slot_index: int
    start_time: float
    vertical_offset: float
    height: float
    page_index: int
    message: Message
    voice_id: Optional[str] = None
    duration_seconds: Optional[float] = None

    @property
    def finalized(self) -> bool:
        return self.duration_seconds is not None

    @property
    def end_time(self) -> float:
        if self.duration_seconds is None:
            raise RuntimeError(f"Slot {self.slot_index} has no duration yet")
        return self.start_time + self.duration_seconds


@dataclass
class PageGroup:
    """
    The bubbles visible between two hard cuts.

    Open until cut(); a cut finalizes every member's duration at the same
    instant and the page can never be admitted to or cut again.
    """
    index: int
    start_time: float
    top: float
    bottom: float
    cursor: float = 0.0
    members: List[Placement] = field(default_factory=list)
    closed_at: Optional[float] = None

    def __post_init__(self):
        self.cursor = self.top

    @property
    def is_open(self) -> bool:
        return self.closed_at is None

    def fits(self, height: float) -> bool:
        return self.cursor + height <= self.bottom

    def admit(self, placement: Placement, gap: float) -> None:
        if not self.is_open:
            raise RuntimeError(f"Page {self.index} is already closed")
        self.members.append(placement)
        self.cursor = placement.vertical_offset + placement.height + gap

    def cut(self, at_time: float) -> None:
        if not self.is_open:
            raise RuntimeError(f"Page {self.index} was already cut at {self.closed_at}")
        for p in self.members:
            p.duration_seconds = max(0.0, at_time - p.start_time)
        self.closed_at = at_time


@dataclass
class LayoutResult:
    placements: List[Placement]
    total_duration: float
    placed_count: int
    dropped_count: int
    pages: List[List[int]]

    @property
    def cut_count(self) -> int:
        # Cuts between pages; the end of the timeline is not counted.
        return max(0, len(self.pages) - 1)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

MessageLike = Union[Message, Mapping[str, Any]]


def _validate(
    preset: LayoutPreset, max_duration_seconds: float, slot_capacity: int, pacing: SpeechPacing,
) -> None:
    preset.validate()
    pacing.validate()
    if not max_duration_seconds or max_duration_seconds <= 0:
        raise InvalidLayoutError(f"max_duration_seconds must be positive, got {max_duration_seconds!r}")
    if isinstance(slot_capacity, bool) or not isinstance(slot_capacity, int) or slot_capacity < 1:
        raise InvalidLayoutError(f"slot_capacity must be a positive integer, got {slot_capacity!r}")


def layout(
    messages: Sequence[MessageLike],
    preset: LayoutPreset,
    max_duration_seconds: float,
    slot_capacity: int,
    voices: Optional[Mapping[str, Optional[str]]] = None,
    pacing: SpeechPacing = DEFAULT_PACING,
) -> LayoutResult:
    """
    Lay out a chat script on the time axis and inside the chat region.

    Messages past the time budget or the slot pool are dropped, not errored;
    callers compare placed_count with len(messages). When `voices` is given,
    a message whose sender has no voice id raises MissingVoiceIdError before
    it is placed.

    A bubble taller than the whole chat region is still placed, alone on its
    page, and renders uncut.

    Admission stops once t >= max_duration_seconds, and also when fewer than
    pacing.floor_seconds remain, so the final cut at the ceiling never leaves
    the last message shorter than the audible floor.
    """
    if not messages:
        raise NoMessagesError()
    _validate(preset, max_duration_seconds, slot_capacity, pacing)

    items = [m if isinstance(m, Message) else Message.from_dict(m) for m in messages]

    t = 0.0
    page = PageGroup(index=0, start_time=0.0, top=preset.chat_top, bottom=preset.chat_bottom)
    pages = [page]
    placements: List[Placement] = []

    for message in items:
        if t >= max_duration_seconds or t + pacing.floor_seconds > max_duration_seconds:
            break
        slot = len(placements) + 1
        if slot > slot_capacity:
            break

        voice_id = None
        if voices is not None:
            voice_id = voices.get(message.sender)
            if not voice_id:
                raise MissingVoiceIdError(message.sender)

        height = estimate_bubble_height(message, preset)
        if page.members and not page.fits(height):
            page.cut(t)
            page = PageGroup(index=len(pages), start_time=t, top=preset.chat_top, bottom=preset.chat_bottom)
            pages.append(page)

        duration = estimate_line_seconds(spoken_text(message, pacing), pacing)
        placement = Placement(
            slot_index=slot,
            start_time=t,
            vertical_offset=page.cursor,
            height=height,
            page_index=page.index,
            message=message,
            voice_id=voice_id,
        )
        page.admit(placement, preset.gap_y)
        placements.append(placement)

        t += max(pacing.floor_seconds, duration) + pacing.gap_seconds

    total = min(t, max_duration_seconds)
    page.cut(total)

    return LayoutResult(
        placements=placements,
        total_duration=total,
        placed_count=len(placements),
        dropped_count=len(items) - len(placements),
        pages=[[p.slot_index for p in pg.members] for pg in pages if pg.members],
    )


class TimelineLayoutEngine:
    """Layout bound to one preset, slot pool and pacing."""

    def __init__(self, preset: LayoutPreset, slot_capacity: int, pacing: SpeechPacing = DEFAULT_PACING):
        self.preset = preset.validate()
        self.slot_capacity = slot_capacity
        self.pacing = pacing

    def layout(
        self,
        messages: Sequence[MessageLike],
        max_duration_seconds: float,
        voices: Optional[Mapping[str, Optional[str]]] = None,
    ) -> LayoutResult:
        return layout(
            messages,
            self.preset,
            max_duration_seconds,
            self.slot_capacity,
            voices=voices,
            pacing=self.pacing,
        )

    def describe(self, result: LayoutResult) -> Dict[str, Any]:
        return {
            "preset": self.preset.name,
            "placed": result.placed_count,
            "dropped": result.dropped_count,
            "pages": len(result.pages),
            "total_duration": round(result.total_duration, 3),
        }
