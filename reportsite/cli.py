from __future__ import annotations

import argparse
import locale
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .config import load_site_config
from .errors import IO_ERROR_EXIT_CODE, SiteError
from .pages import GeneratedPage, assemble_site, build_page
from .project import Project, discard_staging_dir, init_project, make_staging_dir, replace_output_dir
from .render import PlaceholderTemplate


def build_site(start_dir: Path, verbose: bool = False) -> Project:
    """Run the full build for the project found from ``start_dir``.

    Pages, index and sitemap are written to a staging directory that only
    replaces ``out/`` once everything succeeded.
    """
    project = Project.discover(start_dir)
    site_config = load_site_config(project.config_path)
    project.check_structure()
    page_template = PlaceholderTemplate.from_path(project.page_template)
    documents = project.discover_reports()

    staging_dir = make_staging_dir(project.root)
    try:
        pages: list[GeneratedPage] = []
        for document in documents:
            meta = build_page(document.path, document.slug, page_template, staging_dir, site_config)
            pages.append(GeneratedPage(slug=document.slug, metadata=meta))
            if verbose:
                print(f"  {document.slug}.html")
        assemble_site(project.root, pages, site_config, output_dir=staging_dir)
        replace_output_dir(staging_dir, project.output_dir, project.root)
    except BaseException:
        discard_staging_dir(staging_dir)
        raise
    return project


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reportsite", description="Static site generator for fault reports.")
    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build", help="Build the site found from the current directory.")
    build.add_argument(
        "--project-dir",
        default=".",
        help="Directory to start the upward search for siteconfig.yml/siteconfig.yaml.",
    )
    build.add_argument("-v", "--verbose", action="store_true", help="List every generated page.")

    init = subparsers.add_parser("init", help="Create a new report site project.")
    init.add_argument("path", help="Directory to create.")
    return parser


def use_user_locale() -> None:
    """Pick up the user's LC_TIME so ``%x`` page dates follow their locale."""
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error:
        pass


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_usage(sys.stderr)
        print("This application takes 1 or more args.", file=sys.stderr)
        return 1

    use_user_locale()
    try:
        if args.command == "build":
            start = time.perf_counter()
            project = build_site(Path(args.project_dir), verbose=args.verbose)
            elapsed = time.perf_counter() - start
            print(f"Build completed in {elapsed:.2f}s.")
            print(f"Site generated in: {project.output_dir}")
        elif args.command == "init":
            target = init_project(Path(args.path))
            print(f"Project created in: {target}")
    except SiteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return exc.exit_code
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return IO_ERROR_EXIT_CODE
    return 0


if __name__ == "__main__":
    sys.exit(main())
