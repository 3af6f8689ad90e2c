"""Exceptions raised by the config importer."""


class ConfigImporterError(Exception):
    """Base class for all config importer errors."""


class NotFoundError(ConfigImporterError):
    """No YAML record exists for the given config name."""

    def __init__(self, name: str, directory: str) -> None:
        self.name = name
        self.directory = directory
        super().__init__(f"Config {name} not found in {directory}")


class UnsupportedDataError(ConfigImporterError):
    """YAML record cannot be parsed or is not a mapping."""

    def __init__(self, name: str, path: str, reason: str) -> None:
        self.name = name
        self.path = path
        super().__init__(f"Invalid data in config {name} ({path}): {reason}")


class InvalidEntityTypeError(ConfigImporterError):
    """Entity type is not registered."""

    def __init__(self, entity_type: str) -> None:
        self.entity_type = entity_type
        super().__init__(f'The "{entity_type}" entity type does not exist.')


class MisconfiguredError(ConfigImporterError):
    """Required setting is absent."""

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"Setting {setting} is not configured")


class EntityStorageError(ConfigImporterError):
    """Entity cannot be persisted."""
