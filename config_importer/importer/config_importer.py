"""Imports a single config object or config entity from YAML into the live store."""

from pathlib import Path

from config_importer.config.settings import Settings
from config_importer.database.postgres import PostgresClient
from config_importer.domain.config import ConfigEntityMeta
from config_importer.errors import MisconfiguredError
from config_importer.logger.logger import get_logger, init_logger
from config_importer.logger.types import Category, Level, param
from config_importer.repository.config_repository import ConfigRepository
from config_importer.repository.entity_repository import ConfigEntity, EntityTypeManager
from config_importer.services.config_factory import Config, ConfigFactory
from config_importer.storage.file_storage import FileStorage


class ConfigImporter:
    """
    Imports config or config entities from YAML exports.

    Whether a config name is simple configuration or a config entity is
    decided from the registered entity type definitions only.
    """

    SYNC_DIRECTORY_SETTING = "config_sync_directory"

    def __init__(
        self,
        entity_type_manager: EntityTypeManager,
        config_factory: ConfigFactory,
        settings: Settings,
        postgres: PostgresClient | None = None,
    ) -> None:
        """
        Initialize ConfigImporter.

        Args:
            entity_type_manager: Entity type registry and storage factory
            config_factory: Factory for simple configuration objects
            settings: Settings holding the config sync directory
            postgres: PostgreSQL client owned by the importer, closed by close()
        """
        self.entity_type_manager = entity_type_manager
        self.config_factory = config_factory
        self.settings = settings
        self.postgres = postgres
        self.logger = get_logger().with_category(Category.CONFIG)

    @classmethod
    def create(cls, settings: Settings | None = None) -> "ConfigImporter":
        """
        Create an importer wired to the default PostgreSQL-backed services.

        Args:
            settings: Settings; read from the environment when omitted

        Returns:
            ConfigImporter with a connected PostgreSQL pool; close it when done
        """
        settings = settings or Settings()
        init_logger(
            settings.service_name,
            settings.environment,
            level=Level.parse(settings.log_level),
        )

        postgres = PostgresClient(settings.postgres)
        postgres.connect()

        repository = ConfigRepository(postgres)
        try:
            repository.ensure_table_exists()
        except Exception:
            postgres.close()
            raise
        config_factory = ConfigFactory(repository)

        definitions = []
        if settings.entity_types_file:
            definitions = EntityTypeManager.load_definitions(settings.entity_types_file)
        entity_type_manager = EntityTypeManager(config_factory, definitions)

        return cls(entity_type_manager, config_factory, settings, postgres)

    def close(self) -> None:
        """Close the PostgreSQL pool opened by create()."""
        if self.postgres:
            self.postgres.close()

    def __enter__(self) -> "ConfigImporter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def import_(self, id: str, path: str | Path | None = None) -> Config | ConfigEntity:
        """
        Import config or a config entity, detecting which one id names.

        Args:
            id: Config name, e.g. "system.site" or "node.type.article"
            path: Directory with the YAML exports, defaults to the sync directory

        Returns:
            The imported Config or ConfigEntity
        """
        if not id:
            raise ValueError("Config name must not be empty")

        meta = self.classify(id)
        if meta:
            return self.import_config_entity(id, meta.entity_id, meta.entity_type, path)
        return self.import_config(id, path)

    def import_config(self, id: str, path: str | Path | None = None) -> Config:
        """
        Import simple configuration, replacing whatever is stored.

        Args:
            id: Config name
            path: Directory with the YAML exports, defaults to the sync directory

        Returns:
            The saved Config
        """
        source = FileStorage(self._resolve_path(path))
        data = source.read(id)

        # Existing or new
        config = self.config_factory.get_editable(id)
        config.set_data(data).save()

        self.logger.info(
            "Config imported",
            param("name", id),
            param("source", str(source.directory)),
        )
        return config

    def import_config_entity(
        self,
        config_id: str,
        entity_id: str,
        entity_type: str,
        path: str | Path | None = None,
    ) -> ConfigEntity:
        """
        Import a config entity.

        An existing entity is updated key by key from the YAML record; keys
        missing from the record keep their stored values. A missing entity
        is created from the record.

        Args:
            config_id: Full config name, e.g. "node.type.article"
            entity_id: Entity id, e.g. "article"
            entity_type: Entity type id, e.g. "node_type"
            path: Directory with the YAML exports, defaults to the sync directory

        Returns:
            The saved ConfigEntity
        """
        source = FileStorage(self._resolve_path(path))
        data = source.read(config_id)

        storage = self.entity_type_manager.get_storage(entity_type)
        entity = storage.load(entity_id)
        if entity:
            for key, value in data.items():
                entity.set(key, value)
        else:
            entity = storage.create(data)
        entity.save()

        self.logger.info(
            "Config entity imported",
            param("name", config_id),
            param("entity_type", entity_type),
            param("entity_id", entity_id),
            param("source", str(source.directory)),
        )
        return entity

    def classify(self, id: str) -> ConfigEntityMeta | None:
        """
        Work out whether a config name belongs to a config entity.

        Only three-part names (provider.type.instance) are candidates. The
        first registered definition matching provider and type wins.

        Returns:
            ConfigEntityMeta, or None for simple configuration
        """
        parts = id.split(".")
        if len(parts) != 3:
            return None
        provider, type_segment, instance = parts

        matches = [
            definition
            for definition in self.entity_type_manager.get_definitions().values()
            if definition.matches(provider, type_segment)
        ]
        if not matches:
            return None

        if len(matches) > 1:
            self.logger.debug(
                "Several entity types match config name, using the first",
                param("name", id),
                param("entity_types", [definition.id for definition in matches]),
            )
        return ConfigEntityMeta(entity_type=matches[0].id, entity_id=instance)

    def _resolve_path(self, path: str | Path | None) -> str | Path:
        """Use path when given, else the configured sync directory."""
        if path:
            return path
        sync_directory = self.settings.get(self.SYNC_DIRECTORY_SETTING)
        if not sync_directory:
            self.logger.error(
                "Config sync directory is not configured",
                None,
                param("setting", self.SYNC_DIRECTORY_SETTING),
            )
            raise MisconfiguredError(self.SYNC_DIRECTORY_SETTING)
        return sync_directory
