from collections.abc import Mapping

from sim.core.utils.constants import DEFAULT_CONTENT_TYPE

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"BM": "image/bmp",
    b"II*\x00": "image/tiff",
    b"MM\x00*": "image/tiff",
}


def detect_mime_type(head: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if head.startswith(signature):
            return mime

    # WEBP is a RIFF container with a WEBP form type at offset 8
    if head.startswith(b"RIFF") and head[8:12] == b"WEBP":
        return "image/webp"

    return DEFAULT_CONTENT_TYPE
