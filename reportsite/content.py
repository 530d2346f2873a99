from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ContentError

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
FRONT_MATTER_START = "---"
FRONT_MATTER_END = {"---", "..."}


@dataclass(frozen=True)
class ReportMetadata:
    title: str
    date: dt.date
    update_date: Optional[dt.date] = None

    @property
    def effective_date(self) -> dt.date:
        return self.update_date or self.date


def normalize_newlines(text: str) -> str:
    text = text.lstrip("\ufeff")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _where(source: Optional[Path]) -> str:
    return f" in {source}" if source is not None else ""


def split_front_matter(text: str, source: Optional[Path] = None) -> tuple[str, str]:
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FRONT_MATTER_START:
        raise ContentError(f"Missing front matter{_where(source)}.")
    for i in range(1, len(lines)):
        if lines[i].rstrip() in FRONT_MATTER_END:
            return "\n".join(lines[1:i]), "\n".join(lines[i + 1 :])
    raise ContentError(f"Unterminated front matter{_where(source)}.")


def parse_date(value: object, field: str, source: Optional[Path] = None) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ContentError(f"Invalid {field} {value!r}{_where(source)}; expected YYYY-MM-DD.")


def parse_metadata(text: str, source: Optional[Path] = None) -> ReportMetadata:
    """Parse the front-matter block of ``text`` into a ReportMetadata.

    ``text`` is expected to be newline-normalized already.
    """
    block, _ = split_front_matter(text, source)
    return load_metadata(block, source)


def load_metadata(block: str, source: Optional[Path] = None) -> ReportMetadata:
    """Load an already split front-matter block.

    Only ``title``, ``date`` and ``updateDate`` are read; other keys are
    ignored.
    """
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise ContentError(f"Invalid YAML front matter{_where(source)}: {exc}") from exc
    if not isinstance(data, dict):
        raise ContentError(f"Front matter must be a mapping{_where(source)}.")

    title = data.get("title")
    if title is None or isinstance(title, (dict, list)):
        raise ContentError(f"Missing title{_where(source)}.")
    title = str(title).strip()
    if not title:
        raise ContentError(f"Empty title{_where(source)}.")

    if data.get("date") is None:
        raise ContentError(f"Missing date{_where(source)}.")
    date = parse_date(data["date"], "date", source)

    update_date = None
    if data.get("updateDate") is not None:
        update_date = parse_date(data["updateDate"], "updateDate", source)

    return ReportMetadata(title=title, date=date, update_date=update_date)


class CodeFenceTracker:
    """Track whether successive lines sit inside a fenced code block.

    A fence closes on a line holding only the opening fence character,
    repeated at least as many times as in the opening fence.
    """

    def __init__(self) -> None:
        self.marker = ""

    def feed(self, line: str) -> bool:
        """Consume ``line``; return True if it is a fence line or fenced code."""
        match = FENCE_RE.match(line)
        if match:
            marker = match.group(2)
            if not self.marker:
                self.marker = marker
            elif marker.startswith(self.marker) and not line.strip()[len(marker) :]:
                self.marker = ""
            return True
        return bool(self.marker)


def normalize_list_spacing(text: str) -> str:
    out: list[str] = []
    fences = CodeFenceTracker()
    for line in text.splitlines():
        if fences.feed(line):
            out.append(line)
            continue
        list_match = LIST_MARKER_RE.match(line)
        if list_match and not list_match.group("indent"):
            if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                out.append("")
        out.append(line)
    return "\n".join(out)
