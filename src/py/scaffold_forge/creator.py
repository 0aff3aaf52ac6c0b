"""Project creation from a preset.

A preset is the already-resolved answer set of the interactive prompts: which
plugins to use, with which options, and where tool configuration should live.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import msgspec

from scaffold_forge.config import GeneratorConfig
from scaffold_forge.exceptions import PresetError
from scaffold_forge.generator import Generator
from scaffold_forge.plugins import resolve_plugins

if TYPE_CHECKING:
    from scaffold_forge.generator import FileWriter
    from scaffold_forge.plugins import Plugin, PluginRegistry

__all__ = ("DEFAULT_PRESET", "Creator", "Preset", "load_preset")

logger = logging.getLogger("scaffold_forge")


def _plugins_factory() -> dict[str, dict[str, Any]]:
    return {}


@dataclass
class Preset:
    """Resolved project choices.

    Attributes:
        plugins: Plugin id -> plugin options, in the order they should run.
        use_config_files: Put tool configuration in dedicated files instead of ``package.json``.
        vue_version: Major Vue version of the generated app.
        css_preprocessor: Optional CSS preprocessor (``sass``, ``less``, ``stylus``).
    """

    plugins: dict[str, dict[str, Any]] = field(default_factory=_plugins_factory)
    use_config_files: bool = False
    vue_version: str = "3"
    css_preprocessor: "str | None" = None

    @classmethod
    def from_dict(cls, data: "Mapping[str, Any]") -> "Preset":
        """Build a preset from its JSON form.

        Both ``use_config_files`` and the camel-cased ``useConfigFiles`` are accepted.

        Raises:
            PresetError: If the data is not a valid preset.

        Returns:
            The preset.
        """
        if not isinstance(data, Mapping):
            msg = f"A preset must be an object, got {type(data).__name__}"
            raise PresetError(msg)
        plugins = data.get("plugins", {})
        if not isinstance(plugins, Mapping) or not all(
            options is None or isinstance(options, Mapping) for options in plugins.values()
        ):
            msg = "Preset 'plugins' must map plugin ids to option objects"
            raise PresetError(msg)
        return cls(
            plugins={plugin_id: dict(options or {}) for plugin_id, options in plugins.items()},
            use_config_files=bool(data.get("use_config_files", data.get("useConfigFiles", False))),
            vue_version=str(data.get("vue_version", data.get("vueVersion", "3"))),
            css_preprocessor=data.get("css_preprocessor", data.get("cssPreprocessor")),
        )


DEFAULT_PRESET = Preset(
    plugins={
        "@vue/cli-plugin-babel": {},
        "@vue/cli-plugin-eslint": {"config": "base", "lintOn": ["save"]},
    },
)


def load_preset(path: "Path | str") -> Preset:
    """Load a preset from a JSON file.

    Raises:
        PresetError: If the file cannot be read or is not a valid preset.

    Returns:
        The preset.
    """
    try:
        data = msgspec.json.decode(Path(path).read_bytes())
    except OSError as e:
        msg = f"Could not read preset {str(path)!r}: {e.strerror or e}"
        raise PresetError(msg) from e
    except msgspec.DecodeError as e:
        msg = f"Preset {str(path)!r} is not valid JSON: {e}"
        raise PresetError(msg) from e
    return Preset.from_dict(data)


class Creator:
    """Creates a project directory from a preset.

    Args:
        name: Project name, written to ``package.json``.
        context: Target directory.
        registry: Where plugin generators are looked up. Defaults to the built-in plugins.
        config: Generator configuration.
        writer: Filesystem writer passed on to the generator.
    """

    def __init__(
        self,
        name: str,
        context: "Path | str",
        *,
        registry: "PluginRegistry | None" = None,
        config: "GeneratorConfig | None" = None,
        writer: "FileWriter | None" = None,
    ) -> None:
        if registry is None:
            from scaffold_forge.builtin import default_registry

            registry = default_registry()
        self.name = name
        self.context = Path(context)
        self.registry = registry
        self.config = config or GeneratorConfig()
        self.writer = writer

    def initial_package(self, plugins: "Mapping[str, Mapping[str, Any]]") -> dict[str, Any]:
        """Seed ``package.json`` with the project name and every plugin as a dev dependency.

        Returns:
            The initial manifest.
        """
        return {
            "name": self.name,
            "version": "0.1.0",
            "private": True,
            "devDependencies": {
                plugin_id: options.get("version") or "latest" for plugin_id, options in plugins.items()
            },
        }

    def resolve_plugins(self, preset: Preset) -> "list[Plugin]":
        """Order the preset plugins, root first, and attach their generators.

        The root plugin receives the project name and the preset choices as options.

        Returns:
            The plugin list.
        """
        root_id = self.config.root_plugin_id
        raw_plugins = {plugin_id: dict(options) for plugin_id, options in preset.plugins.items()}
        raw_plugins[root_id] = {
            "projectName": self.name,
            "vueVersion": preset.vue_version,
            "useConfigFiles": preset.use_config_files,
            "cssPreprocessor": preset.css_preprocessor,
            "plugins": {plugin_id: dict(options) for plugin_id, options in preset.plugins.items()},
            **raw_plugins.get(root_id, {}),
        }
        return resolve_plugins(raw_plugins, self.registry, root_id)

    async def create(self, preset: "Preset | None" = None) -> Generator:
        """Generate the project.

        Returns:
            The generator, for access to the final manifest, files and exit logs.
        """
        preset = preset or DEFAULT_PRESET
        logger.info("Creating project %s in %s", self.name, self.context)
        plugins = self.resolve_plugins(preset)
        generator = Generator(
            self.context,
            pkg=self.initial_package({plugin.id: plugin.options for plugin in plugins}),
            plugins=plugins,
            config=self.config,
            writer=self.writer,
        )
        await generator.generate(extract_config_files=preset.use_config_files)
        return generator
