"""
Turns uploaded bytes into text for the decoder.

The decoder only ever sees the complete, fully buffered text. Line endings
are left untouched here; the decoder splits on LF and CRLF itself.
"""

from __future__ import annotations

from typing import Any, Dict

from charset_normalizer import from_bytes

_UTF8_BOM = b"\xef\xbb\xbf"


def read_upload_text(raw: bytes) -> tuple[str, Dict[str, Any]]:
    """
    Decode upload bytes to str.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - If decode with the detected encoding fails, try UTF-8.
    - If that fails too, decode with replacement characters and report it.
    - A leading UTF-8 BOM is dropped.
    """
    detected = None

    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    # utf-8-sig so the BOM doesn't end up glued to the first header name
    if raw.startswith(_UTF8_BOM) and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
            decode_fallback = True
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
            decode_fallback = True

    # a BOM decoded by a non-utf-8 codec path still shows up as U+FEFF
    text = text.lstrip("\ufeff")

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "bytes": len(raw),
    }
    return text, report
