from __future__ import annotations

SIGIL = "$"


def is_identifier_char(ch: str) -> bool:
    return bool(ch) and (ch.isalnum() or ch == "_")


def symbol_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the symbol ending at ``offset``.

    Identifier characters are collected leftwards; one leading ``$`` is part
    of the symbol so variables complete with their sigil.
    """
    end = max(0, min(len(text or ""), int(offset)))
    start = end
    while start > 0 and is_identifier_char(text[start - 1]):
        start -= 1
    if start > 0 and text[start - 1] == SIGIL:
        start -= 1
    return start, end


def symbol_at_cursor(text: str, offset: int) -> str | None:
    """Return the prefix to complete at ``offset``.

    ``""`` when the cursor touches no symbol (after ``->``, ``::`` or
    whitespace). ``None`` when the cursor sits inside a symbol.
    """
    text = text or ""
    start, end = symbol_bounds(text, offset)
    if end < len(text) and is_identifier_char(text[end]):
        return None
    return text[start:end]
