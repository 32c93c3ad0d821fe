"""
faceless/video_engine/mp3.py
Estimate the playing time of an MP3 by walking its frame headers.
Returns 0.0 for anything that does not parse; never raises.
"""

# Bitrate tables in kbps, keyed by MPEG version then layer.
# version: 3 = MPEG-1, 2 = MPEG-2, 0 = MPEG-2.5; layer: 3 = I, 2 = II, 1 = III
_BITRATES = {
    3: {
        3: [0, 32, 64, 96, 128, 160, 192, 224, 256, 288, 320, 352, 384, 416, 448],
        2: [0, 32, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 384],
        1: [0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320],
    },
    2: {
        3: [0, 32, 48, 56, 64, 80, 96, 112, 128, 144, 160, 176, 192, 224, 256],
        2: [0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160],
        1: [0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160],
    },
}
_BITRATES[0] = _BITRATES[2]

_SAMPLE_RATES = {
    3: [44100, 48000, 32000],
    2: [22050, 24000, 16000],
    0: [11025, 12000, 8000],
}

_MAX_FRAMES = 200_000


def _id3_skip(data: bytes) -> int:
    if len(data) >= 10 and data[:3] == b"ID3":
        size = (
            ((data[6] & 0x7F) << 21)
            | ((data[7] & 0x7F) << 14)
            | ((data[8] & 0x7F) << 7)
            | (data[9] & 0x7F)
        )
        return 10 + size
    return 0


def _frame_info(data: bytes, offset: int):
    """Return (samples, frame_length, sample_rate) for a header at offset, or None."""
    b1, b2 = data[offset + 1], data[offset + 2]
    if data[offset] != 0xFF or (b1 & 0xE0) != 0xE0:
        return None

    version = (b1 >> 3) & 0x03
    layer = (b1 >> 1) & 0x03
    if version == 1 or layer == 0:
        return None

    bitrate_idx = (b2 >> 4) & 0x0F
    sr_idx = (b2 >> 2) & 0x03
    padding = (b2 >> 1) & 0x01
    if bitrate_idx in (0, 15) or sr_idx == 3:
        return None

    bitrate = _BITRATES[version][layer][bitrate_idx] * 1000
    sample_rate = _SAMPLE_RATES[version][sr_idx]

    if layer == 3:
        samples = 384
        frame_len = int((12 * bitrate / sample_rate + padding) * 4)
    else:
        samples = 1152 if (layer == 2 or version == 3) else 576
        coef = 72 if (layer == 1 and version != 3) else 144
        frame_len = int(coef * bitrate / sample_rate + padding)

    if frame_len <= 0:
        return None
    return samples, frame_len, sample_rate


def mp3_duration_seconds(data: bytes) -> float:
    if not data:
        return 0.0
    try:
        data = bytes(data)
        offset = _id3_skip(data)
        total_samples = 0
        sample_rate = 0
        frames = 0

        while offset + 4 < len(data) and frames < _MAX_FRAMES:
            info = _frame_info(data, offset)
            if info is None:
                offset += 1
                continue
            samples, frame_len, sample_rate = info
            total_samples += samples
            offset += frame_len
            frames += 1

        if total_samples <= 0 or not sample_rate:
            return 0.0
        return total_samples / sample_rate
    except (IndexError, TypeError, ValueError):
        return 0.0
