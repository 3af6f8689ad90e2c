"""Import single config objects and config entities from YAML exports."""

from config_importer.importer.config_importer import ConfigImporter

__all__ = ["ConfigImporter"]
