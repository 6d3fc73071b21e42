"""Suggestion records returned by phpactor plus offset helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Suggestion:
    name: str
    short_description: str
    kind: str
    class_import: str | None = None

    @classmethod
    def from_payload(cls, item: dict) -> Suggestion:
        class_import = _text(item.get("class_import"))
        return cls(
            name=_text(item.get("name")),
            short_description=_text(item.get("short_description")),
            kind=_text(item.get("type")),
            class_import=class_import or None,
        )


def _text(value: object) -> str:
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def utf8_units_for_prefix(text: str, codepoint_index: int) -> int:
    """Byte offset of ``codepoint_index`` in the UTF-8 encoding of ``text``."""
    if not text:
        return 0
    idx = max(0, min(len(text), int(codepoint_index)))
    return len(text[:idx].encode("utf-8", errors="surrogatepass"))
