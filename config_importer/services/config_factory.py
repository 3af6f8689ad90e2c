"""Config objects and the factory that hands them out."""

import copy
from typing import Any

from config_importer.logger.logger import get_logger
from config_importer.logger.types import Category, param
from config_importer.repository.config_repository import ConfigRepository


class Config:
    """A named simple configuration object backed by the config table."""

    def __init__(
        self,
        name: str,
        repository: ConfigRepository,
        data: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.repository = repository
        self.is_new = data is None
        self._data: dict[str, Any] = data if data is not None else {}

    def get(self, key: str | None = None, default: Any = None) -> Any:  # noqa: ANN401
        """
        Get a value, or the whole payload when key is None.

        Nested keys are dot-separated, e.g. "page.front".
        """
        if key is None:
            return self._data
        value: Any = self._data
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def set(self, key: str, value: Any) -> "Config":  # noqa: ANN401
        self._data[key] = value
        return self

    def set_data(self, data: dict[str, Any]) -> "Config":
        """Replace the whole payload."""
        self._data = copy.deepcopy(dict(data))
        return self

    def get_raw_data(self) -> dict[str, Any]:
        return self._data

    def save(self) -> "Config":
        self.repository.write(self.name, self._data)
        self.is_new = False
        return self

    def delete(self) -> "Config":
        self.repository.delete(self.name)
        self._data = {}
        self.is_new = True
        return self


class ConfigFactory:
    """Hands out Config objects for names in the live store."""

    def __init__(self, repository: ConfigRepository) -> None:
        """
        Initialize ConfigFactory.

        Args:
            repository: ConfigRepository for the active collection
        """
        self.repository = repository
        self.logger = get_logger().with_category(Category.CONFIG)

    def get(self, name: str) -> Config:
        """
        Load a config object.

        Returns:
            Config; is_new is True when nothing is stored under name
        """
        return Config(name, self.repository, self.repository.read(name))

    def get_editable(self, name: str) -> Config:
        """
        Load a config object for editing, creating it if absent.

        Args:
            name: Config name

        Returns:
            Existing or new Config, never None
        """
        config = self.get(name)
        if config.is_new:
            self.logger.debug("Creating new config", param("name", name))
        return config
