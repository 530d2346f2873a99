from __future__ import annotations

import html
import re
import xml.etree.ElementTree as etree

from markdown import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.preprocessors import Preprocessor

from .content import CodeFenceTracker

CONTAINER_RE = re.compile(r"^(?P<fence>:{3,})[ \t]*(?P<info>[^\s:][^\s]*)?(?P<rest>.*)$")
# ``::text::``; double colons inside words (``std::vector``) are not containers.
INLINE_CONTAINER_RE = r"(?<![\w:])::(?![\s:])(.+?)(?<![\s:])::(?![\w:])"


class ContainerPreprocessor(Preprocessor):
    """Turn ``:::`` fenced containers into ``<div markdown="1">`` blocks.

    ``::: warning`` opens ``<div class="warning">``; a line holding only
    colons, at least as many as the opening fence, closes the innermost
    open container. The div bodies are parsed as markdown by md_in_html.
    """

    def run(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        stack: list[int] = []
        fences = CodeFenceTracker()
        for line in lines:
            if fences.feed(line):
                out.append(line)
                continue
            match = CONTAINER_RE.match(line.rstrip())
            if not match:
                out.append(line)
                continue
            width = len(match.group("fence"))
            info = match.group("info")
            if info is None and not match.group("rest").strip() and stack and width >= stack[-1]:
                stack.pop()
                out.extend(["", "</div>", ""])
                continue
            stack.append(width)
            if info:
                out.extend(["", f'<div class="{html.escape(info)}" markdown="1">', ""])
            else:
                out.extend(["", '<div markdown="1">', ""])
        while stack:
            stack.pop()
            out.extend(["", "</div>", ""])
        return out


class InlineContainerProcessor(InlineProcessor):
    def handleMatch(self, m, data):
        el = etree.Element("span")
        el.text = m.group(1)
        return el, m.start(0), m.end(0)


class ContainerExtension(Extension):
    def extendMarkdown(self, md) -> None:
        md.registerExtension(self)
        md.preprocessors.register(ContainerPreprocessor(md), "report_containers", 30)
        # After code spans and links, before emphasis.
        md.inlinePatterns.register(InlineContainerProcessor(INLINE_CONTAINER_RE, md), "report_inline_containers", 65)


def makeExtension(**kwargs) -> ContainerExtension:
    return ContainerExtension(**kwargs)
