from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .config import find_site_config
from .errors import (
    ConfigurationError,
    MissingReportsError,
    MissingTemplateError,
    ParentMissingError,
    TargetExistsError,
)

SOURCE_SUFFIXES = {".md", ".txt"}
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent / "template"
DEFAULT_FILES = ("siteconfig.yaml", "template.html", "template.index.html")


@dataclass(frozen=True)
class SourceDocument:
    path: Path
    slug: str


@dataclass(frozen=True)
class Project:
    root: Path
    config_path: Path

    @classmethod
    def discover(cls, start: Path) -> "Project":
        config_path = find_site_config(start)
        if config_path is None:
            raise ConfigurationError("No site configuration file exists (siteconfig.yml or siteconfig.yaml).")
        return cls(root=config_path.parent, config_path=config_path)

    @property
    def reports_dir(self) -> Path:
        return self.root / "reports"

    @property
    def output_dir(self) -> Path:
        return self.root / "out"

    @property
    def page_template(self) -> Path:
        return self.root / "template.html"

    @property
    def index_template(self) -> Path:
        return self.root / "template.index.html"

    def check_structure(self) -> None:
        if not self.reports_dir.is_dir():
            raise MissingReportsError(f"No reports directory exists: {self.reports_dir}")
        for template in (self.page_template, self.index_template):
            if not template.is_file():
                raise MissingTemplateError(f"No {template.name} exists: {template}")

    def discover_reports(self) -> list[SourceDocument]:
        documents = []
        for path in self.reports_dir.rglob("*"):
            if not path.is_file() or path.suffix not in SOURCE_SUFFIXES:
                continue
            documents.append(SourceDocument(path=path, slug=slug_for(path, self.reports_dir)))
        documents.sort(key=lambda doc: doc.slug)
        return documents


def slug_for(path: Path, reports_dir: Path) -> str:
    return path.relative_to(reports_dir).with_suffix("").as_posix()


def make_staging_dir(project_root: Path) -> Path:
    staging_dir = Path(tempfile.mkdtemp(prefix=".out-staging-", dir=project_root))
    staging_dir.chmod(0o755)
    return staging_dir


def replace_output_dir(staging_dir: Path, output_dir: Path, project_root: Path) -> None:
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved or not output_resolved.is_relative_to(root_resolved):
        raise OSError(f"Refusing to replace output directory outside project root: {output_dir}")
    if output_dir.exists():
        shutil.rmtree(output_dir)
    staging_dir.rename(output_dir)


def discard_staging_dir(staging_dir: Path) -> None:
    shutil.rmtree(staging_dir, ignore_errors=True)


def init_project(target: Path, template_dir: Path = DEFAULT_TEMPLATE_DIR) -> Path:
    target = Path(target)
    parent = target.absolute().parent
    if not parent.is_dir():
        raise ParentMissingError(f"No directory found: {parent}")
    if target.exists():
        raise TargetExistsError(f"Directory already found: {target}")
    target.mkdir()
    (target / "reports").mkdir()
    for name in DEFAULT_FILES:
        shutil.copyfile(template_dir / name, target / name)
    return target
