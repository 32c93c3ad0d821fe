"""
faceless/video_engine/audio_store.py
File-based storage for synthesized dialogue audio.

Files live under output/audio/<render_id>/chat/ and are served by the
FastAPI static mount at /audio, so the render service can fetch them.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from faceless.core.config import AUDIO_OUTPUT_DIR, get_public_base_url

logger = logging.getLogger(__name__)


def _safe_segment(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_-]", "_", str(value or "").strip()) or "unknown"


def audio_path_for(render_id: str, slot: int) -> str:
    """Relative storage path of one slot's audio, e.g. <id>/chat/audio_0007.mp3."""
    return f"{_safe_segment(render_id)}/chat/audio_{int(slot):04d}.mp3"


def save_audio(relative_path: str, data: bytes, root: Optional[Path] = None) -> Path:
    root = root or AUDIO_OUTPUT_DIR
    target = root / relative_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    logger.info(f"Audio saved: {target} ({len(data)} bytes)")
    return target


def audio_url_from_path(relative_path: str) -> str:
    """Convert a storage path to the public URL served by the /audio mount."""
    return f"{get_public_base_url()}/audio/{relative_path}"


def store_slot_audio(render_id: str, slot: int, data: bytes, root: Optional[Path] = None) -> str:
    relative = audio_path_for(render_id, slot)
    save_audio(relative, data, root=root)
    return audio_url_from_path(relative)
