"""Shared fixtures: an in-memory config store and a YAML sync directory."""

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

from config_importer.config.settings import Settings
from config_importer.domain.config import EntityTypeDefinition
from config_importer.importer.config_importer import ConfigImporter
from config_importer.logger.logger import get_logger
from config_importer.logger.types import Category
from config_importer.repository.config_repository import ConfigRepository
from config_importer.repository.entity_repository import EntityTypeManager
from config_importer.services.config_factory import ConfigFactory


class InMemoryConfigRepository(ConfigRepository):
    """ConfigRepository keeping rows in a dict instead of PostgreSQL."""

    def __init__(self) -> None:
        self.collection = ""
        self.logger = get_logger().with_category(Category.DATABASE)
        self.rows: dict[str, dict[str, Any]] = {}
        self.writes: list[str] = []

    def ensure_table_exists(self) -> None:
        pass

    def read(self, name: str) -> dict[str, Any] | None:
        data = self.rows.get(name)
        return copy.deepcopy(data) if data is not None else None

    def write(self, name: str, data: dict[str, Any]) -> None:
        self.rows[name] = copy.deepcopy(data)
        self.writes.append(name)

    def delete(self, name: str) -> bool:
        return self.rows.pop(name, None) is not None

    def list_all(self, prefix: str = "") -> list[str]:
        return sorted(name for name in self.rows if name.startswith(prefix))


NODE_TYPE = EntityTypeDefinition(id="node_type", provider="node", config_prefix="type")
MENU = EntityTypeDefinition(id="menu", provider="system")
IMAGE_STYLE = EntityTypeDefinition(
    id="image_style", provider="image", config_prefix="style", id_key="name"
)


@pytest.fixture
def repository() -> InMemoryConfigRepository:
    return InMemoryConfigRepository()


@pytest.fixture
def config_factory(repository: InMemoryConfigRepository) -> ConfigFactory:
    return ConfigFactory(repository)


@pytest.fixture
def definitions() -> list[EntityTypeDefinition]:
    return [NODE_TYPE, MENU, IMAGE_STYLE]


@pytest.fixture
def entity_type_manager(
    config_factory: ConfigFactory, definitions: list[EntityTypeDefinition]
) -> EntityTypeManager:
    return EntityTypeManager(config_factory, definitions)


@pytest.fixture
def sync_dir(tmp_path: Path) -> Path:
    path = tmp_path / "sync"
    path.mkdir()
    return path


@pytest.fixture
def write_yaml(sync_dir: Path):
    """Write a config record into the sync directory."""

    def _write(name: str, data: Any, directory: Path | None = None) -> Path:
        path = (directory or sync_dir) / f"{name}.yml"
        path.write_text(yaml.safe_dump(data))
        return path

    return _write


@pytest.fixture
def settings(sync_dir: Path) -> Settings:
    return Settings(config_sync_directory=str(sync_dir))


@pytest.fixture
def importer(
    entity_type_manager: EntityTypeManager,
    config_factory: ConfigFactory,
    settings: Settings,
) -> ConfigImporter:
    return ConfigImporter(entity_type_manager, config_factory, settings)


@pytest.fixture(autouse=True)
def reset_logger(monkeypatch):
    """Start every test with a fresh global logger."""
    import config_importer.logger.logger

    monkeypatch.setattr(config_importer.logger.logger, "_global_logger", None)
