"""
Language plugins for the source editor.

This package provides the plugin system that turns source text into syntax
trees, including the base plugin interface and plugin manager.
"""

from plugins.base import LanguagePlugin
from plugins.manager import PluginManager

__all__ = ['LanguagePlugin', 'PluginManager']
