"""
faceless/video_engine/tts.py
ElevenLabs text-to-speech integration.

Sends one line of dialogue to ElevenLabs and returns MP3 bytes.
Requires ELEVENLABS_API_KEY env var.
"""

import logging
import re
from typing import Optional

import httpx

from faceless.core.config import get_elevenlabs_key, get_elevenlabs_model

logger = logging.getLogger(__name__)

ELEVENLABS_TTS_URL = "https://api.elevenlabs.io/v1/text-to-speech"

CHAT_VOICE_SETTINGS = {"stability": 0.4, "similarity_boost": 0.85}
PREVIEW_VOICE_SETTINGS = {"stability": 0.5, "similarity_boost": 0.5}
PREVIEW_TEXT = "This is a quick voice preview from NofaceLabs."


class TTSError(RuntimeError):
    def __init__(self, code: str, message: str = "", status: Optional[int] = None):
        self.code = code
        self.status = status
        super().__init__(f"{code} {message}".strip())


def normalize_voice_id(voice_id: str) -> str:
    """Accept a raw id or a pasted voice URL; keep the last path segment."""
    v = str(voice_id or "").strip()
    if "/" in v:
        v = v.rstrip("/").rsplit("/", 1)[-1]
    return re.sub(r"[^A-Za-z0-9_-]", "", v)


def synthesize(
    text: str,
    voice_id: str,
    settings: Optional[dict] = None,
    stream: bool = True,
) -> bytes:
    """
    Convert text to speech using ElevenLabs.

    Raises TTSError on missing configuration, an upstream error status, or an
    empty body. Nothing is retried here.
    """
    api_key = get_elevenlabs_key()
    if not api_key:
        raise TTSError("MISSING_ELEVENLABS_API_KEY")

    voice = normalize_voice_id(voice_id)
    if not voice:
        raise TTSError("MISSING_VOICE_ID")

    spoken = str(text or "").strip()
    if not spoken:
        raise TTSError("MISSING_TTS_TEXT")

    url = f"{ELEVENLABS_TTS_URL}/{voice}" + ("/stream" if stream else "")
    headers = {
        "xi-api-key": api_key,
        "Content-Type": "application/json",
        "Accept": "audio/mpeg",
    }
    body = {
        "text": spoken,
        "model_id": get_elevenlabs_model(),
        "voice_settings": settings or CHAT_VOICE_SETTINGS,
    }

    try:
        with httpx.Client(timeout=60.0) as client:
            resp = client.post(url, headers=headers, json=body)
    except httpx.HTTPError as exc:
        logger.error(f"ElevenLabs TTS request failed for voice {voice}: {exc}")
        raise TTSError("ELEVENLABS_TTS_FAILED", str(exc)) from exc

    if resp.status_code >= 400:
        logger.error(f"ElevenLabs TTS failed ({resp.status_code}) for voice {voice}")
        raise TTSError("ELEVENLABS_TTS_FAILED", resp.text[:800], status=resp.status_code)

    audio = resp.content
    if not audio:
        raise TTSError("ELEVENLABS_EMPTY_AUDIO")

    logger.info(f"TTS audio generated: voice={voice} chars={len(spoken)} bytes={len(audio)}")
    return audio
