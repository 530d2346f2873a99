from __future__ import annotations

import datetime as dt
import html
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .config import SiteConfig
from .content import ReportMetadata, load_metadata, normalize_newlines, split_front_matter
from .errors import ContentError
from .render import PlaceholderTemplate, render_markdown, write_text

DATE_FMT = "%Y-%m-%d"
SITEMAP_DIR = "sitemap"
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_MAX_URLS = 50000
INDEX_TEMPLATE = "template.index.html"


@dataclass(frozen=True)
class GeneratedPage:
    slug: str
    metadata: ReportMetadata

    @property
    def href(self) -> str:
        return f"{self.slug}.html"


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    return f"{base}/{path}"


def format_date(value: dt.date) -> str:
    return value.strftime(DATE_FMT)


def build_page(
    source_path: Path,
    slug: str,
    page_template: PlaceholderTemplate,
    output_dir: Path,
    site_config: SiteConfig,
) -> ReportMetadata:
    try:
        raw_text = normalize_newlines(source_path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ContentError(f"{source_path} is not valid UTF-8: {exc}") from exc
    block, body = split_front_matter(raw_text, source_path)
    meta = load_metadata(block, source_path)
    html_content = render_markdown(body)
    html_doc = page_template.render(
        title=html.escape(meta.title),
        content=html_content,
        date=meta.effective_date.strftime(site_config.date_format),
    )
    write_text(output_dir / f"{slug}.html", html_doc)
    return meta


def sort_pages(pages: Iterable[GeneratedPage]) -> list[GeneratedPage]:
    # Stable: pages sharing an effective date keep their input order.
    return sorted(pages, key=lambda page: page.metadata.effective_date, reverse=True)


def build_index_rows(pages: list[GeneratedPage]) -> str:
    rows = []
    for page in pages:
        rows.append(
            f"<tr><td>{format_date(page.metadata.effective_date)}</td>"
            f'<td><a href="{html.escape(page.href)}">{html.escape(page.metadata.title)}</a></td></tr>'
        )
    return "".join(rows)


def build_index(index_template: PlaceholderTemplate, output_dir: Path, pages: list[GeneratedPage]) -> None:
    html_doc = index_template.render(index=build_index_rows(pages))
    write_text(output_dir / "index.html", html_doc)


def sitemap_entries(pages: list[GeneratedPage], base_url: str) -> list[tuple[str, str]]:
    return [(join_url(base_url, page.href), format_date(page.metadata.effective_date)) for page in pages]


def render_urlset(entries: list[tuple[str, str]]) -> str:
    items = [
        f"<url><loc>{html.escape(loc)}</loc><lastmod>{lastmod}</lastmod></url>" for loc, lastmod in entries
    ]
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NS}">',
            *items,
            "</urlset>",
            "",
        ]
    )


def render_sitemap_index(locations: list[str]) -> str:
    items = [f"<sitemap><loc>{html.escape(loc)}</loc></sitemap>" for loc in locations]
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<sitemapindex xmlns="{SITEMAP_NS}">',
            *items,
            "</sitemapindex>",
            "",
        ]
    )


def build_sitemap(
    output_dir: Path,
    pages: list[GeneratedPage],
    base_url: str,
    max_urls: int = SITEMAP_MAX_URLS,
) -> list[Path]:
    """Write the sitemap files for ``pages`` and return their paths.

    URLs are split into ``sitemap-001.xml``, ``sitemap-002.xml``, ... with at
    most ``max_urls`` entries each. A ``sitemap-index.xml`` pointing at the
    parts is added when more than one part is written.
    """
    sitemap_dir = output_dir / SITEMAP_DIR
    sitemap_dir.mkdir(parents=True, exist_ok=True)
    entries = sitemap_entries(pages, base_url)
    chunks = [entries[i : i + max_urls] for i in range(0, len(entries), max_urls)] or [[]]
    written = []
    for number, chunk in enumerate(chunks, start=1):
        path = sitemap_dir / f"sitemap-{number:03d}.xml"
        write_text(path, render_urlset(chunk))
        written.append(path)
    if len(written) > 1:
        locations = [join_url(base_url, f"{SITEMAP_DIR}/{path.name}") for path in written]
        index_path = sitemap_dir / "sitemap-index.xml"
        write_text(index_path, render_sitemap_index(locations))
        written.append(index_path)
    return written


def assemble_site(
    project_dir: Path,
    pages: list[GeneratedPage],
    site_config: SiteConfig,
    output_dir: Optional[Path] = None,
) -> None:
    if output_dir is None:
        output_dir = project_dir / "out"
    ordered = sort_pages(pages)
    build_sitemap(output_dir, ordered, site_config.base_url)
    index_template = PlaceholderTemplate.from_path(project_dir / INDEX_TEMPLATE)
    build_index(index_template, output_dir, ordered)
