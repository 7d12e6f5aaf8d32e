"""Base class for release file updates."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Update(ABC):
    """A change to one file in the release pull request.

    The host reads the current contents of ``path`` and commits the result
    of :meth:`update_content` to the release branch.

    Attributes:
        path: Repository-relative path of the file
        version: Version being released
        changelog_entry: Changelog entry of the release
        package_name: Name of the released package
        create: Whether the file may be created when absent
        optional: Whether the update is skipped when the file or its
            version field is absent
    """

    create: bool = False
    optional: bool = False

    def __init__(
        self,
        path: str,
        version: str,
        changelog_entry: str = "",
        package_name: str = "",
    ) -> None:
        self.path = path
        self.version = version
        self.changelog_entry = changelog_entry
        self.package_name = package_name

    @abstractmethod
    def update_content(self, content: str) -> str:
        """Return the new contents given the current ones.

        Raises:
            VersionNotFoundError: If the file has no version to update
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, version={self.version!r})"
