"""
Utility modules for plugin info cards
"""
from .config_loader import load_cards_config, CardsConfig, CatalogConfig, CacheConfig, FieldSelection

__all__ = [
    'load_cards_config',
    'CardsConfig',
    'CatalogConfig',
    'CacheConfig',
    'FieldSelection',
]
