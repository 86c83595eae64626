"""HTTP header helpers"""

from urllib.parse import quote


def content_disposition(filename: str) -> str:
    """
    Attachment header safe for any filename.

    Headers are latin-1 on the wire, so the plain `filename` carries an ASCII
    fallback (non-ASCII characters become underscores, quotes escaped) and
    `filename*` carries the real UTF-8 name (RFC 6266).
    """
    fallback = "".join(ch if 32 <= ord(ch) < 127 else "_" for ch in filename)
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
