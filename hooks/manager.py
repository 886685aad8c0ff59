# hooks/manager.py
import importlib.util
import inspect
import logging
import os
from typing import Any, List, Optional

from context import RunContext
from .base import BasePlugin
from .clean_output import CleanOutputPlugin

logger = logging.getLogger(__name__)


class PluginManager:
    """
    Loads plugins and runs the hook chains.
    A failing plugin is logged and skipped; it never aborts a command.
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.plugins: List[BasePlugin] = []

    def load_plugins(self, plugins_dir: Optional[str] = None):
        """
        Register the built-in plugins, then every BasePlugin subclass
        found in the plugins directory (default: <program>/plugins).
        """
        self.register(CleanOutputPlugin())

        plugins_dir = plugins_dir or self.context.global_config.plugins_dir
        if not os.path.isdir(plugins_dir):
            # A missing directory just means no user plugins.
            return

        logger.debug(f"🔌 [Hooks] Scanning plugin directory: {plugins_dir}")
        for filename in sorted(os.listdir(plugins_dir)):
            if filename.endswith(".py") and not filename.startswith("__"):
                self._load_plugin_from_file(os.path.join(plugins_dir, filename))

    def _load_plugin_from_file(self, filepath: str):
        try:
            module_name = os.path.splitext(os.path.basename(filepath))[0]
            spec = importlib.util.spec_from_file_location(module_name, filepath)
            if not spec or not spec.loader:
                return
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)

            loaded_count = 0
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if (
                    issubclass(obj, BasePlugin)
                    and obj is not BasePlugin
                    and obj.__module__ == module.__name__
                ):
                    plugin_instance = obj()
                    self.register(plugin_instance)
                    loaded_count += 1
                    logger.info(f"   ✅ [Hooks] Loaded plugin: {plugin_instance.name}")

            if loaded_count == 0:
                logger.warning(f"   ⚠️ [Hooks] No BasePlugin subclass in {filepath}")

        except Exception as e:
            logger.error(f"❌ [Hooks] Failed to load plugin {filepath}: {e}")

    def register(self, plugin: BasePlugin):
        self.plugins.append(plugin)

    def trigger(self, event_name: str, *args, **kwargs):
        """Run a notification hook (no return value) on every plugin."""
        for plugin in self.plugins:
            method = getattr(plugin, event_name, None)
            if method:
                try:
                    method(self.context, *args, **kwargs)
                except Exception as e:
                    logger.error(f"❌ [Hooks] Plugin {plugin.name} failed in {event_name}: {e}")

    def filter(self, event_name: str, initial_value: Any, *args, **kwargs) -> Any:
        """
        Run a filter hook as a pipeline: each plugin receives the previous
        plugin's output. A None result keeps the current value.
        """
        value = initial_value
        for plugin in self.plugins:
            method = getattr(plugin, event_name, None)
            if method:
                try:
                    new_value = method(self.context, value, *args, **kwargs)
                    if new_value is not None:
                        value = new_value
                except Exception as e:
                    logger.error(f"❌ [Hooks] Plugin {plugin.name} failed in {event_name}: {e}")
        return value
