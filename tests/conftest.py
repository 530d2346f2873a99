from pathlib import Path

import pytest

PAGE_TEMPLATE = (
    "<html><head><title><!-- DOC:title --></title></head>"
    "<body><p class=\"date\"><!-- DOC:date --></p><!-- DOC:content --></body></html>\n"
)
INDEX_TEMPLATE = "<table><!-- DOC:index --></table>\n"


def report_text(title=None, date=None, update_date=None, body="Body text.\n", extra=""):
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if update_date is not None:
        lines.append(f"updateDate: {update_date}")
    if extra:
        lines.append(extra)
    lines.append("---")
    return "\n".join(lines) + "\n" + body


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    (root / "reports").mkdir()
    (root / "siteconfig.yaml").write_text('baseUrl: https://x.test/\ndateFormat: "%Y-%m-%d"\n', encoding="utf-8")
    (root / "template.html").write_text(PAGE_TEMPLATE, encoding="utf-8")
    (root / "template.index.html").write_text(INDEX_TEMPLATE, encoding="utf-8")
    return root


@pytest.fixture
def add_report(project: Path):
    def _add(rel: str, **kwargs) -> Path:
        path = project / "reports" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report_text(**kwargs), encoding="utf-8")
        return path

    return _add
