"""the registry-backed package source."""
from .source import RegistrySource, RegistryConfig
from .client import Registry, Source
from .metadata import MetadataIndex, shard_path
from .index import IndexStore

__all__ = [
    "RegistrySource",
    "RegistryConfig",
    "Registry",
    "Source",
    "MetadataIndex",
    "shard_path",
    "IndexStore",
]
