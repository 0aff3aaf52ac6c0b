"""Scaffold-Forge: plugin-driven project scaffolding.

Plugins contribute template directories and ``package.json`` fragments; the
generator composes them into one project tree.

Basic usage:
    import anyio
    from scaffold_forge import Creator, Preset

    preset = Preset(plugins={"@vue/cli-plugin-babel": {}, "@vue/cli-plugin-router": {"historyMode": True}})
    anyio.run(Creator("my-app", "./my-app").create, preset)

Writing a plugin:
    from pathlib import Path
    from scaffold_forge import PluginRegistry

    registry = PluginRegistry()


    @registry.register("vue-cli-plugin-pwa")
    def pwa(api, options, root_options):
        api.render("template", {"themeColor": options.get("themeColor", "#4DBA87")}, base_dir=Path(__file__).parent)
        api.extend_package({"vue": {"pwa": {"workboxOptions": {"skipWaiting": True}}}})
"""

from scaffold_forge.api import GeneratorAPI, MergeOptions
from scaffold_forge.config import GeneratorConfig, LoggingConfig
from scaffold_forge.creator import DEFAULT_PRESET, Creator, Preset, load_preset
from scaffold_forge.generator import Generator
from scaffold_forge.plugins import Plugin, PluginRegistry, resolve_plugins
from scaffold_forge.transform import ConfigTransform
from scaffold_forge.values import JSExpression

__all__ = (
    "DEFAULT_PRESET",
    "ConfigTransform",
    "Creator",
    "Generator",
    "GeneratorAPI",
    "GeneratorConfig",
    "JSExpression",
    "LoggingConfig",
    "MergeOptions",
    "Plugin",
    "PluginRegistry",
    "Preset",
    "load_preset",
    "resolve_plugins",
)
