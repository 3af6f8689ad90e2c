"""Read-only access to YAML config exports on disk."""

from pathlib import Path
from typing import Any

import yaml

from config_importer.errors import NotFoundError, UnsupportedDataError
from config_importer.logger.logger import get_logger
from config_importer.logger.types import Category, param


class FileStorage:
    """A directory of <name>.yml files, one config object per file."""

    def __init__(self, directory: str | Path, extension: str = "yml") -> None:
        self.directory = Path(directory)
        self.extension = extension
        self.logger = get_logger().with_category(Category.STORAGE)

    def get_file_path(self, name: str) -> Path:
        return self.directory / f"{name}.{self.extension}"

    def exists(self, name: str) -> bool:
        return self.get_file_path(name).is_file()

    def read(self, name: str) -> dict[str, Any]:
        """
        Read a config record.

        Args:
            name: Config name

        Returns:
            Parsed mapping, {} for an empty document

        Raises:
            NotFoundError: no file for name
            UnsupportedDataError: file is not valid YAML or not a mapping
        """
        path = self.get_file_path(name)
        if not path.is_file():
            raise NotFoundError(name, str(self.directory))

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise UnsupportedDataError(name, str(path), str(e)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise UnsupportedDataError(
                name, str(path), f"expected a mapping, got {type(data).__name__}"
            )

        self.logger.debug("Config read", param("name", name), param("path", str(path)))
        return data

    def list_all(self, prefix: str = "") -> list[str]:
        """List config names in the directory, optionally by prefix."""
        if not self.directory.is_dir():
            return []
        suffix = f".{self.extension}"
        return sorted(
            path.name[: -len(suffix)]
            for path in self.directory.iterdir()
            if path.is_file() and path.name.endswith(suffix) and path.name.startswith(prefix)
        )
