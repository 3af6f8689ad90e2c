"""Config entity storage and entity type registry."""

import copy
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from config_importer.domain.config import EntityTypeDefinition
from config_importer.errors import EntityStorageError, InvalidEntityTypeError
from config_importer.logger.logger import get_logger
from config_importer.logger.types import Category, param
from config_importer.services.config_factory import ConfigFactory


class ConfigEntity:
    """A config entity: a values mapping plus the type it belongs to."""

    def __init__(
        self,
        entity_type: EntityTypeDefinition,
        values: dict[str, Any],
        storage: "ConfigEntityStorage",
        is_new: bool = True,
    ) -> None:
        self.entity_type = entity_type
        self.values = values
        self.storage = storage
        self._is_new = is_new

    def id(self) -> str | None:
        value = self.values.get(self.entity_type.id_key)
        return None if value is None else str(value)

    def config_name(self) -> str:
        """Full config name, e.g. "node.type.article"."""
        return f"{self.entity_type.get_config_prefix()}.{self.id()}"

    def get(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> "ConfigEntity":  # noqa: ANN401
        self.values[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self.values)

    def is_new(self) -> bool:
        return self._is_new

    def save(self) -> "ConfigEntity":
        self.storage.save(self)
        return self

    def __repr__(self) -> str:
        return f"ConfigEntity({self.entity_type.id}:{self.id()})"


class ConfigEntityStorage:
    """Loads and persists entities of one type through the config factory."""

    def __init__(self, entity_type: EntityTypeDefinition, config_factory: ConfigFactory) -> None:
        self.entity_type = entity_type
        self.config_factory = config_factory
        self.logger = get_logger().with_category(Category.ENTITY)

    def _config_name(self, entity_id: str) -> str:
        return f"{self.entity_type.get_config_prefix()}.{entity_id}"

    def load(self, entity_id: str) -> ConfigEntity | None:
        """
        Load an entity by id.

        Returns:
            ConfigEntity or None if not stored
        """
        config = self.config_factory.get(self._config_name(entity_id))
        if config.is_new:
            return None
        values = config.get_raw_data()
        # Stored under its id, so the row may omit it
        values.setdefault(self.entity_type.id_key, entity_id)
        return ConfigEntity(self.entity_type, values, self, is_new=False)

    def create(self, values: dict[str, Any]) -> ConfigEntity:
        """Construct a new, unsaved entity from values."""
        return ConfigEntity(self.entity_type, copy.deepcopy(dict(values)), self)

    def save(self, entity: ConfigEntity) -> None:
        entity_id = entity.id()
        if entity_id is None:
            raise EntityStorageError(
                f"Entity of type {self.entity_type.id} has no "
                f'"{self.entity_type.id_key}" value and cannot be saved'
            )

        config = self.config_factory.get_editable(self._config_name(entity_id))
        config.set_data(entity.to_dict()).save()

        self.logger.info(
            "Entity created" if entity.is_new() else "Entity updated",
            param("entity_type", self.entity_type.id),
            param("entity_id", entity_id),
        )
        entity._is_new = False

    def delete(self, entity: ConfigEntity) -> None:
        entity_id = entity.id()
        if entity_id is None:
            return
        self.config_factory.get(self._config_name(entity_id)).delete()
        entity._is_new = True


class EntityTypeManager:
    """Registry of config entity types and their storages."""

    def __init__(
        self,
        config_factory: ConfigFactory,
        definitions: Iterable[EntityTypeDefinition] = (),
    ) -> None:
        """
        Initialize EntityTypeManager.

        Args:
            config_factory: Factory the entity storages write through
            definitions: Entity type definitions in registration order
        """
        self.config_factory = config_factory
        self._definitions: dict[str, EntityTypeDefinition] = {}
        self._storages: dict[str, ConfigEntityStorage] = {}
        for definition in definitions:
            self._definitions[definition.id] = definition

    @staticmethod
    def load_definitions(path: str | Path) -> list[EntityTypeDefinition]:
        """
        Read entity type definitions from a YAML list.

        Each item needs "id" and "provider"; "config_prefix" and "id_key"
        are optional.
        """
        items = yaml.safe_load(Path(path).read_text()) or []
        return [
            EntityTypeDefinition(
                id=item["id"],
                provider=item["provider"],
                config_prefix=item.get("config_prefix"),
                id_key=item.get("id_key", "id"),
            )
            for item in items
        ]

    def get_definitions(self) -> dict[str, EntityTypeDefinition]:
        return dict(self._definitions)

    def get_definition(self, entity_type: str) -> EntityTypeDefinition:
        try:
            return self._definitions[entity_type]
        except KeyError:
            raise InvalidEntityTypeError(entity_type) from None

    def get_storage(self, entity_type: str) -> ConfigEntityStorage:
        """
        Get the storage for an entity type.

        Raises:
            InvalidEntityTypeError: entity type is not registered
        """
        if entity_type not in self._storages:
            self._storages[entity_type] = ConfigEntityStorage(
                self.get_definition(entity_type), self.config_factory
            )
        return self._storages[entity_type]
