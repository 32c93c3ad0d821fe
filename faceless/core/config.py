"""
faceless/core/config.py
Environment and JSON configuration. Accessors read os.environ at call time.
"""
import json
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
AUDIO_OUTPUT_DIR = BASE_DIR / "output" / "audio"


def load_json(name: str):
    path = BASE_DIR / name
    if not path.exists():
        return {}
    raw = path.read_text(encoding="utf-8").strip()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return {}


CHAT_PRESETS = load_json("chat_presets.json")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_slot_capacity() -> int:
    # Must match the number of Msg{i}_* slots built into the render templates.
    return _env_int("CHAT_SLOT_CAPACITY", 60)


def get_max_duration_ceiling() -> float:
    return _env_float("MAX_DURATION_CEILING", 90.0)


def get_template_id(preset_name: str) -> str:
    return os.getenv(f"CREATO_CHAT_TEMPLATE_{preset_name.upper()}", "").strip()


def get_allow_origins() -> list[str]:
    raw = os.getenv("ALLOW_ORIGINS") or os.getenv("ALLOW_ORIGIN") or "*"
    return [s.strip() for s in raw.split(",") if s.strip()]


def get_public_base_url() -> str:
    return os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").strip().rstrip("/")


def get_elevenlabs_key() -> str | None:
    return os.getenv("ELEVENLABS_API_KEY") or os.getenv("XI_API_KEY")


def get_elevenlabs_model() -> str:
    return os.getenv("ELEVENLABS_MODEL_ID", "eleven_multilingual_v2")


def get_creatomate_key() -> str | None:
    return os.getenv("CREATOMATE_API_KEY")


def get_speech_pacing_overrides() -> dict:
    """Empirically tuned pacing values; unset variables keep the engine defaults."""
    overrides = {}
    for field, var in (
        ("words_per_second", "TTS_WORDS_PER_SECOND"),
        ("pad_seconds", "TTS_PAD_SECONDS"),
        ("floor_seconds", "TTS_FLOOR_SECONDS"),
        ("gap_seconds", "TTS_GAP_SECONDS"),
    ):
        raw = os.getenv(var, "").strip()
        if not raw:
            continue
        try:
            overrides[field] = float(raw)
        except ValueError:
            continue
    return overrides


def get_database_url() -> str:
    env_url = os.getenv("DATABASE_URL", "").strip()
    if env_url:
        return env_url
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{DATA_DIR / 'faceless.sqlite3'}"
