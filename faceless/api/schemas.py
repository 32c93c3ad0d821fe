"""
faceless/api/schemas.py
All Pydantic request/response models for the API layer.
No logic here — only data shapes.

Request field names follow the JSON the web front-end already sends
(camelCase), response fields are snake_case.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


# --- Fake text: request ---

class ChatMessageIn(BaseModel):
    sender: Optional[str] = "me"
    type: Optional[str] = "text"
    text: Optional[str] = None
    imageUrl: Optional[str] = None


class VoiceRef(BaseModel):
    voiceId: Optional[str] = None


class Voices(BaseModel):
    me: Optional[VoiceRef] = None
    them: Optional[VoiceRef] = None

    def as_mapping(self) -> Dict[str, Optional[str]]:
        return {
            "me": self.me.voiceId if self.me else None,
            "them": self.them.voiceId if self.them else None,
        }


class Receiver(BaseModel):
    name: Optional[str] = None
    avatarUrl: Optional[str] = None


class Background(BaseModel):
    url: Optional[str] = None


class FakeTextOptions(BaseModel):
    maxDurationSeconds: Optional[float] = None


class FakeTextRequest(BaseModel):
    template: str = "iphone"
    messages: List[ChatMessageIn] = Field(default_factory=list)
    voices: Voices = Field(default_factory=Voices)
    receiver: Receiver = Field(default_factory=Receiver)
    background: Background = Field(default_factory=Background)
    options: FakeTextOptions = Field(default_factory=FakeTextOptions)


# --- Fake text: responses ---

class PlacementOut(BaseModel):
    slot: int
    start: float
    duration: float
    y: float
    page: int
    sender: str
    type: str


class LayoutPreviewResponse(BaseModel):
    template: str
    placed_messages: int
    dropped_messages: int
    total_duration: float
    max_duration: float
    pages: List[List[int]]
    placements: List[PlacementOut]


class FakeTextResponse(BaseModel):
    ok: bool = True
    job_id: str
    db_id: str
    request_id: str
    template: str
    placed_messages: int
    dropped_messages: int
    total_duration: float
    pages: int
    max_duration: float


# --- Renders ---

class RenderOut(BaseModel):
    id: str
    kind: str
    status: str
    render_id: str
    video_url: Optional[str] = None
    choices: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
