"""
faceless/api/routes/voice.py
Voice preview endpoint: a short sample of an ElevenLabs voice.
"""
from fastapi import APIRouter, HTTPException, Response

from faceless.video_engine.tts import PREVIEW_TEXT, PREVIEW_VOICE_SETTINGS, TTSError, synthesize

router = APIRouter()


@router.get("/voice-preview")
def voice_preview(voiceId: str = "", text: str = ""):
    if not voiceId.strip():
        raise HTTPException(status_code=400, detail={"error": "MISSING_VOICE_ID"})
    try:
        audio = synthesize(
            text.strip() or PREVIEW_TEXT,
            voiceId,
            settings=PREVIEW_VOICE_SETTINGS,
            stream=False,
        )
    except TTSError as exc:
        if exc.code == "MISSING_ELEVENLABS_API_KEY":
            raise HTTPException(status_code=500, detail={"error": exc.code})
        if exc.code == "MISSING_VOICE_ID":
            raise HTTPException(status_code=400, detail={"error": exc.code})
        raise HTTPException(status_code=exc.status or 502, detail={"error": exc.code, "message": str(exc)[:800]})

    # Short cache so repeated plays do not re-bill.
    return Response(content=audio, media_type="audio/mpeg", headers={"Cache-Control": "public, max-age=60"})
