"""
faceless/api/routes/fake_text.py
Fake text-message video endpoints. Layout runs first and rejects bad input
before any speech synthesis or rendering is paid for.
"""
import logging
import uuid
from typing import Dict, Tuple

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from faceless.api.schemas import (
    FakeTextRequest, FakeTextResponse, LayoutPreviewResponse, PlacementOut,
)
from faceless.chat_engine.layout import (
    InvalidLayoutError, LayoutResult, MissingVoiceIdError, NoMessagesError,
    SpeechPacing, TimelineLayoutEngine, spoken_text,
)
from faceless.chat_engine.modifications import build_modifications
from faceless.chat_engine.presets import InvalidPresetError, LayoutPreset, UnknownPresetError, get_preset
from faceless.core.config import (
    get_creatomate_key, get_max_duration_ceiling, get_public_base_url, get_slot_capacity,
)
from faceless.store.db import get_db
from faceless.store.renders import create_render_row, mark_failed, update_render_row
from faceless.video_engine.audio_store import store_slot_audio
from faceless.video_engine.creatomate import CreatomateError, create_render
from faceless.video_engine.mp3 import mp3_duration_seconds
from faceless.video_engine.tts import TTSError, synthesize

logger = logging.getLogger(__name__)

router = APIRouter()


def _max_duration(req: FakeTextRequest) -> float:
    ceiling = get_max_duration_ceiling()
    requested = req.options.maxDurationSeconds
    return min(float(requested or ceiling), ceiling)


def _plan(req: FakeTextRequest) -> Tuple[TimelineLayoutEngine, LayoutResult, float]:
    """Resolve the preset and lay out the script; raises HTTPException on bad input."""
    try:
        preset = get_preset(req.template)
    except UnknownPresetError:
        raise HTTPException(status_code=400, detail={"error": "NO_TEMPLATE_FOR_CHAT", "template": req.template})
    except InvalidPresetError as exc:
        raise HTTPException(status_code=500, detail={"error": "INVALID_PRESET", "message": str(exc)})

    max_duration = _max_duration(req)
    engine = TimelineLayoutEngine(preset, get_slot_capacity(), SpeechPacing.from_env())
    try:
        result = engine.layout(
            [m.model_dump() for m in req.messages],
            max_duration,
            voices=req.voices.as_mapping(),
        )
    except NoMessagesError:
        raise HTTPException(status_code=400, detail={"error": "NO_MESSAGES"})
    except MissingVoiceIdError as exc:
        raise HTTPException(status_code=400, detail={"error": "MISSING_VOICE_ID", "which": exc.sender})
    except InvalidLayoutError as exc:
        raise HTTPException(status_code=400, detail={"error": "INVALID_LAYOUT", "message": str(exc)})

    logger.info(f"Fake text layout: {engine.describe(result)}")
    return engine, result, max_duration


def _synthesize_slots(db_id: str, result: LayoutResult, pacing: SpeechPacing) -> Dict[int, str]:
    audio_urls: Dict[int, str] = {}
    for p in result.placements:
        mp3 = synthesize(spoken_text(p.message, pacing), p.voice_id)
        measured = mp3_duration_seconds(mp3)
        if measured and measured > p.duration_seconds:
            logger.warning(
                f"Slot {p.slot_index}: audio {measured:.2f}s is longer than its "
                f"{p.duration_seconds:.2f}s on screen and will be cut"
            )
        audio_urls[p.slot_index] = store_slot_audio(db_id, p.slot_index, mp3)
    return audio_urls


def _choices(req: FakeTextRequest, preset: LayoutPreset, max_duration: float) -> dict:
    return {
        "kind": "fake_text",
        "template": preset.name,
        "receiver": req.receiver.model_dump(),
        "background": req.background.model_dump(),
        "voices": req.voices.model_dump(),
        "messageCount": len(req.messages),
        "maxDuration": max_duration,
    }


# ---------------------------------------------------------------------------
# POST /fake-text/preview  (layout only, no external calls)
# ---------------------------------------------------------------------------

@router.post("/fake-text/preview", response_model=LayoutPreviewResponse)
def preview_fake_text(req: FakeTextRequest):
    engine, result, max_duration = _plan(req)
    return LayoutPreviewResponse(
        template=engine.preset.name,
        placed_messages=result.placed_count,
        dropped_messages=result.dropped_count,
        total_duration=round(result.total_duration, 3),
        max_duration=max_duration,
        pages=result.pages,
        placements=[
            PlacementOut(
                slot=p.slot_index,
                start=round(p.start_time, 3),
                duration=round(p.duration_seconds, 3),
                y=p.vertical_offset,
                page=p.page_index,
                sender=p.message.sender,
                type=p.message.type,
            )
            for p in result.placements
        ],
    )


# ---------------------------------------------------------------------------
# POST /fake-text  (layout + TTS + render)
# ---------------------------------------------------------------------------

@router.post("/fake-text", response_model=FakeTextResponse)
def create_fake_text(req: FakeTextRequest, db: Session = Depends(get_db)):
    request_id = str(uuid.uuid4())
    engine, result, max_duration = _plan(req)
    preset = engine.preset

    if not preset.template_id:
        raise HTTPException(status_code=400, detail={"error": "NO_TEMPLATE_FOR_CHAT", "template": preset.name})
    if not get_creatomate_key():
        raise HTTPException(status_code=500, detail={"error": "MISSING_CREATOMATE_API_KEY"})

    row = create_render_row(db, "fake_text", _choices(req, preset, max_duration))

    try:
        audio_urls = _synthesize_slots(row.id, result, engine.pacing)
        mods = build_modifications(
            result,
            preset,
            engine.slot_capacity,
            audio_urls=audio_urls,
            receiver=req.receiver.model_dump(),
            background=req.background.model_dump(),
        )
        webhook_url = f"{get_public_base_url()}/creatomate-webhook?id={row.id}&kind=fake_text"
        job_id = create_render(preset.template_id, mods, webhook_url)
    except TTSError as exc:
        mark_failed(db, row, str(exc))
        raise HTTPException(
            status_code=502,
            detail={"error": exc.code, "status": exc.status, "db_id": row.id, "request_id": request_id},
        )
    except CreatomateError as exc:
        mark_failed(db, row, exc.details or exc.code)
        raise HTTPException(
            status_code=502,
            detail={"error": exc.code, "details": exc.details, "db_id": row.id, "request_id": request_id},
        )

    update_render_row(db, row, render_id=job_id, status="rendering")

    return FakeTextResponse(
        job_id=job_id,
        db_id=row.id,
        request_id=request_id,
        template=preset.name,
        placed_messages=result.placed_count,
        dropped_messages=result.dropped_count,
        total_duration=round(result.total_duration, 3),
        pages=len(result.pages),
        max_duration=max_duration,
    )
