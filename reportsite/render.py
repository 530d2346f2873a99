from __future__ import annotations

import re
from pathlib import Path

import markdown

from .containers import ContainerExtension
from .content import normalize_list_spacing, normalize_newlines

PLACEHOLDER_RE = re.compile(r"<!-- DOC:(?P<name>\w+) -->")


def render_markdown(body: str) -> str:
    body = normalize_list_spacing(normalize_newlines(body))
    md = markdown.Markdown(extensions=["fenced_code", "tables", "md_in_html", ContainerExtension()])
    return md.convert(body)


class PlaceholderTemplate:
    """HTML template with ``<!-- DOC:name -->`` placeholder comments.

    All placeholders are replaced in a single pass, so substituted values
    are never scanned for further placeholders. Unknown names are left as
    they are.
    """

    def __init__(self, text: str) -> None:
        self.text = text

    @classmethod
    def from_path(cls, path: Path) -> "PlaceholderTemplate":
        return cls(read_template(path))

    def render(self, **context: str) -> str:
        def repl(match: re.Match) -> str:
            name = match.group("name")
            if name in context:
                return context[name]
            return match.group(0)

        return PLACEHOLDER_RE.sub(repl, self.text)


def read_template(path: Path) -> str:
    return normalize_newlines(path.read_text(encoding="utf-8"))


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
