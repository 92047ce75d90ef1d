"""
Plugin Manager for language plugins.

This module manages plugin registration and selection based on file extensions.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional
import yaml

from plugins.base import LanguagePlugin
from source_editor.config import Settings
from source_editor.engine.errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages language plugin registration and selection."""

    def __init__(self):
        """Initialize the plugin manager."""
        self._plugins: Dict[str, LanguagePlugin] = {}
        self._extension_map: Dict[str, str] = {}
        self._config_cache: Dict[str, Dict] = {}

    @classmethod
    def create_default(cls, settings: Optional[Settings] = None) -> "PluginManager":
        """
        Create a manager with the bundled plugins registered.

        Args:
            settings: Settings providing plugin options; defaults are used if None

        Returns:
            PluginManager with the Java plugin registered

        Raises:
            FileNotFoundError: If the configured plugin directory has no java/config.yaml
            ValueError: If the plugin configuration misses a required field
        """
        from plugins.java.plugin import JavaPlugin

        settings = settings or Settings()
        if settings.plugin_config_dir is not None:
            java_dir = Path(settings.plugin_config_dir) / "java"
        else:
            java_dir = Path(__file__).parent / "java"

        manager = cls()
        config = manager.load_plugin_config(java_dir)
        manager.register_plugin(
            JavaPlugin(config=config, allow_syntax_errors=settings.allow_syntax_errors)
        )
        return manager

    def register_plugin(self, plugin: LanguagePlugin) -> None:
        """
        Register a language plugin.

        Args:
            plugin: LanguagePlugin instance to register
        """
        language_name = plugin.language_name

        if language_name in self._plugins:
            logger.warning(f"Plugin for language '{language_name}' already registered, overwriting")

        self._plugins[language_name] = plugin

        for ext in plugin.file_extensions:
            if ext in self._extension_map:
                logger.warning(
                    f"Extension '{ext}' already mapped to '{self._extension_map[ext]}', "
                    f"overwriting with '{language_name}'"
                )
            self._extension_map[ext] = language_name

        logger.info(
            f"Registered plugin for language '{language_name}' "
            f"with extensions: {plugin.file_extensions}"
        )

    def unregister_plugin(self, language_name: str) -> bool:
        """
        Unregister a plugin.

        Args:
            language_name: Name of the language plugin to unregister

        Returns:
            True if plugin was unregistered, False if not found
        """
        if language_name not in self._plugins:
            return False

        plugin = self._plugins.pop(language_name)
        for ext in plugin.file_extensions:
            if self._extension_map.get(ext) == language_name:
                del self._extension_map[ext]

        logger.info(f"Unregistered plugin for language '{language_name}'")
        return True

    def get_plugin_for_file(self, file_path: str) -> Optional[LanguagePlugin]:
        """
        Get appropriate plugin based on file extension.

        Args:
            file_path: Path to the file

        Returns:
            LanguagePlugin instance if found, None otherwise
        """
        ext = Path(file_path).suffix
        language = self._extension_map.get(ext)

        if language:
            return self._plugins.get(language)

        logger.debug(f"No plugin found for file extension '{ext}' (file: {file_path})")
        return None

    def require_plugin_for_file(self, file_path: str) -> LanguagePlugin:
        """
        Like get_plugin_for_file, but raise when no plugin handles the file.

        Raises:
            UnsupportedLanguageError: If no plugin is registered for the extension
        """
        plugin = self.get_plugin_for_file(file_path)
        if plugin is None:
            raise UnsupportedLanguageError(
                f"No language plugin for {file_path}",
                details={"file_path": str(file_path), "supported": self.list_supported_extensions()},
            )
        return plugin

    def get_plugin(self, language_name: str) -> Optional[LanguagePlugin]:
        """
        Get plugin by language name.

        Args:
            language_name: Name of the language

        Returns:
            LanguagePlugin instance if found, None otherwise
        """
        return self._plugins.get(language_name)

    def list_supported_languages(self) -> List[str]:
        return list(self._plugins.keys())

    def list_supported_extensions(self) -> List[str]:
        return list(self._extension_map.keys())

    def load_plugin_config(self, plugin_dir: Path) -> Dict:
        """
        Load plugin configuration from YAML file.

        Args:
            plugin_dir: Directory containing the plugin and config.yaml

        Returns:
            Dictionary containing plugin configuration

        Raises:
            FileNotFoundError: If config.yaml is not found
            ValueError: If a required field is missing
            yaml.YAMLError: If config.yaml is malformed
        """
        config_path = plugin_dir / "config.yaml"

        cache_key = str(config_path)
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        if not config_path.exists():
            raise FileNotFoundError(f"Plugin configuration not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse plugin configuration {config_path}: {e}")
            raise

        required_fields = ['language', 'file_extensions', 'node_categories']
        for field in required_fields:
            if field not in config:
                raise ValueError(f"Missing required field '{field}' in {config_path}")

        self._config_cache[cache_key] = config

        logger.info(f"Loaded plugin configuration from {config_path}")
        return config
