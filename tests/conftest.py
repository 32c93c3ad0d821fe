import types

import httpx
import pytest
from fastapi.testclient import TestClient

from faceless.chat_engine.presets import LayoutPreset

# MPEG-1 Layer III, 128 kbps, 44.1 kHz, no padding: 417-byte frames of 1152 samples.
MP3_FRAME_HEADER = b"\xff\xfb\x90\x00"
MP3_FRAME_LEN = 417


@pytest.fixture
def iphone_preset():
    return LayoutPreset(
        name="iphone",
        chat_top=320,
        chat_bottom=980,
        chars_per_line=22,
        line_height=44,
        bubble_pad=44,
        image_bubble_height=260,
        gap_y=18,
    )


@pytest.fixture
def mp3_bytes():
    def build(frames: int = 100, id3_size: int = 0) -> bytes:
        frame = MP3_FRAME_HEADER + b"\x00" * (MP3_FRAME_LEN - len(MP3_FRAME_HEADER))
        data = frame * frames
        if id3_size:
            size = bytes([
                (id3_size >> 21) & 0x7F,
                (id3_size >> 14) & 0x7F,
                (id3_size >> 7) & 0x7F,
                id3_size & 0x7F,
            ])
            # tag body full of 0xFF bytes that would look like sync words
            data = b"ID3\x04\x00\x00" + size + b"\xff" * id3_size + data
        return data
    return build


@pytest.fixture
def mock_httpx(monkeypatch):
    """Route a module's httpx.Client through a MockTransport handler."""
    real_client = httpx.Client

    def install(module, handler):
        def factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)
        monkeypatch.setattr(module, "httpx", types.SimpleNamespace(
            Client=factory, Response=httpx.Response, HTTPError=httpx.HTTPError,
        ))

    return install


@pytest.fixture
def client(tmp_path, monkeypatch):
    from faceless.api.app import create_app
    from faceless.store.db import close_db

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'renders.sqlite3'}")
    monkeypatch.setenv("CREATO_CHAT_TEMPLATE_IPHONE", "tpl-iphone")
    monkeypatch.delenv("CREATO_CHAT_TEMPLATE_INSTAGRAM", raising=False)
    monkeypatch.setenv("CREATOMATE_API_KEY", "test-creatomate-key")
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://api.example.test")
    close_db()
    app = create_app()
    with TestClient(app) as c:
        yield c
    close_db()
