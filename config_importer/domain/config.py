"""Configuration domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EntityTypeDefinition:
    """Static metadata of a config entity type."""

    id: str
    provider: str
    config_prefix: str | None = None
    id_key: str = "id"

    def get_config_prefix(self) -> str:
        """Prefix of every config name owned by this type, e.g. "node.type"."""
        return f"{self.provider}.{self.config_prefix or self.id}"

    def matches(self, provider: str, type_segment: str) -> bool:
        """Check whether a config name's first two segments belong to this type."""
        if self.provider != provider:
            return False
        if self.config_prefix:
            return self.config_prefix == type_segment
        return self.id == type_segment


@dataclass(frozen=True)
class ConfigEntityMeta:
    """Entity type and id a config name resolves to."""

    entity_type: str
    entity_id: str
