"""package.json updates for Node releases."""

from __future__ import annotations

import json
from typing import Any

from autorelease.exceptions import VersionNotFoundError
from autorelease.updaters.base import Update


def _load(content: str, path: str) -> dict[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise VersionNotFoundError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise VersionNotFoundError(f"{path} does not contain a JSON object")
    return data


def _dump(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class PackageJsonUpdate(Update):
    """Set the top-level ``"version"`` of package.json."""

    def update_content(self, content: str) -> str:
        data = _load(content, self.path)
        if "version" not in data:
            raise VersionNotFoundError(f"No version field in {self.path}")
        data["version"] = self.version
        return _dump(data)


class SamplesPackageJsonUpdate(Update):
    """Point the samples' dependency on the released package at the new version."""

    optional = True

    def update_content(self, content: str) -> str:
        data = _load(content, self.path)
        dependencies = data.get("dependencies")
        if not isinstance(dependencies, dict) or self.package_name not in dependencies:
            raise VersionNotFoundError(
                f"No dependency on {self.package_name!r} in {self.path}"
            )
        dependencies[self.package_name] = f"^{self.version}"
        return _dump(data)
