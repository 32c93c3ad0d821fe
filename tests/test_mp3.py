import pytest

from faceless.video_engine.mp3 import mp3_duration_seconds


def test_duration_from_frames(mp3_bytes):
    assert mp3_duration_seconds(mp3_bytes(100)) == pytest.approx(100 * 1152 / 44100)


def test_id3_tag_is_skipped(mp3_bytes):
    assert mp3_duration_seconds(mp3_bytes(50, id3_size=64)) == pytest.approx(50 * 1152 / 44100)


def test_leading_garbage_is_skipped(mp3_bytes):
    data = b"\x00\x01garbage" + mp3_bytes(10)
    assert mp3_duration_seconds(data) == pytest.approx(10 * 1152 / 44100)


@pytest.mark.parametrize("data", [b"", b"not an mp3 at all", b"\xff\xff\xff\xff\xff\xff", None])
def test_unparseable_returns_zero(data):
    assert mp3_duration_seconds(data) == 0.0
