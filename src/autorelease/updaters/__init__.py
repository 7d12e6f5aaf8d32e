"""File updates applied by the release pull request."""

from __future__ import annotations

from autorelease.updaters.base import Update
from autorelease.updaters.changelog import ChangelogUpdate
from autorelease.updaters.package_json import PackageJsonUpdate, SamplesPackageJsonUpdate
from autorelease.updaters.python import PythonVersionFileUpdate, PyprojectUpdate
from autorelease.updaters.version_file import VersionFileUpdate

__all__ = [
    "ChangelogUpdate",
    "PackageJsonUpdate",
    "PyprojectUpdate",
    "PythonVersionFileUpdate",
    "SamplesPackageJsonUpdate",
    "Update",
    "VersionFileUpdate",
]
