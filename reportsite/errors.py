from __future__ import annotations


class SiteError(Exception):
    """Base class for errors that abort a build or an init run."""

    exit_code = 1


class ConfigurationError(SiteError):
    exit_code = 3


class StructureError(SiteError):
    exit_code = 4


class MissingReportsError(StructureError):
    exit_code = 4


class MissingTemplateError(StructureError):
    exit_code = 5


class ScaffoldError(SiteError):
    exit_code = 6


class ParentMissingError(ScaffoldError):
    exit_code = 6


class TargetExistsError(ScaffoldError):
    exit_code = 7


class ContentError(SiteError):
    exit_code = 8


IO_ERROR_EXIT_CODE = 9
