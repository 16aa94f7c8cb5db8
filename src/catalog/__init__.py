"""
WordPress.org plugin catalog client
"""
from .client import CatalogClient
from .errors import CatalogError, MalformedResponseError, RecordValidationError, TransportError
from .models import REQUIRED_KEYS, PluginRecord
from .normalize import normalize_plugin, normalize_plugin_list

__all__ = [
    'CatalogClient',
    'CatalogError',
    'MalformedResponseError',
    'RecordValidationError',
    'TransportError',
    'PluginRecord',
    'REQUIRED_KEYS',
    'normalize_plugin',
    'normalize_plugin_list',
]
