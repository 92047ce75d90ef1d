"""
Java language plugin.

This plugin parses Java source into syntax trees with tree-sitter-java.
"""

from plugins.java.plugin import JavaPlugin

__all__ = ['JavaPlugin']
