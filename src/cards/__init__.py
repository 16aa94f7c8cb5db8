"""
Plugin card rendering
"""
from .renderer import AuthorQuery, CardRenderer, parse_slugs, render_star_rating

__all__ = [
    'AuthorQuery',
    'CardRenderer',
    'parse_slugs',
    'render_star_rating',
]
