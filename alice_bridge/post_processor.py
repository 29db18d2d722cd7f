from typing import Iterable

# Alice rejects response texts over 1024 characters
MAX_RESPONSE_LENGTH = 1024
TRUNCATE_AT = 1020
ELLIPSIS = "…"


def process_response(raw: str, stop_markers: Iterable[str] = ()) -> str:
    text = raw or ""
    for marker in stop_markers:
        index = text.find(marker)
        if index != -1:
            text = text[:index]
    return text.strip()


def truncate_reply(text: str, limit: int = MAX_RESPONSE_LENGTH, cut: int = TRUNCATE_AT) -> str:
    if len(text) > limit:
        return text[:cut] + ELLIPSIS
    return text
