"""Project generator.

The :class:`Generator` owns the ``package.json`` draft and the in-memory file
map of one run. It runs every plugin's generator entry in order, extracts
config files, renders the queued templates, canonicalizes the manifest and
finally hands the complete file map to the filesystem writer.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from scaffold_forge.api import GeneratorAPI
from scaffold_forge.config import GeneratorConfig
from scaffold_forge.exceptions import PluginOrderError
from scaffold_forge.manifest import encode_package, sort_package
from scaffold_forge.transform import DEFAULT_CONFIG_TRANSFORMS
from scaffold_forge.writer import write_file_tree

if TYPE_CHECKING:
    from rich.console import Console

    from scaffold_forge.api import FileMiddleware
    from scaffold_forge.plugins import Plugin
    from scaffold_forge.transform import ConfigTransform

__all__ = ("FileMap", "FileWriter", "Generator")

logger = logging.getLogger("scaffold_forge")

FileMap = dict[str, "str | bytes"]
FileWriter = Callable[[Path, FileMap], Awaitable[None]]

_EXIT_LOG_STYLES = {
    "log": "",
    "info": "[cyan]",
    "done": "[green]",
    "warn": "[yellow]",
    "error": "[bold red]",
}


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _ensure_eol(content: str) -> str:
    return content.rstrip("\n") + "\n"


class Generator:
    """Generates a project from a list of plugins.

    Args:
        context: Directory the project is written to.
        pkg: Initial ``package.json`` content.
        plugins: Plugins in invocation order; the root plugin must come first.
        files: Initial file map.
        config: Generator configuration.
        writer: Coroutine writing the final file map, defaults to :func:`write_file_tree`.

    Raises:
        PluginOrderError: If the root plugin is missing or not first.
    """

    def __init__(
        self,
        context: "Path | str",
        *,
        pkg: "Mapping[str, Any] | None" = None,
        plugins: "Iterable[Plugin]" = (),
        files: "FileMap | None" = None,
        config: "GeneratorConfig | None" = None,
        writer: "FileWriter | None" = None,
    ) -> None:
        self.context = Path(context)
        self.config = config or GeneratorConfig()
        self.plugins = list(plugins)
        self.original_pkg = dict(pkg or {})
        self.pkg: dict[str, Any] = dict(self.original_pkg)
        self.files: FileMap = files if files is not None else {}
        self.file_middlewares: list[FileMiddleware] = []
        self.exit_logs: list[tuple[str, str, str]] = []
        self.config_transforms: dict[str, ConfigTransform] = dict(DEFAULT_CONFIG_TRANSFORMS)
        self.writer: FileWriter = writer or write_file_tree

        root_id = self.config.root_plugin_id
        if not self.plugins or self.plugins[0].id != root_id:
            found = self.plugins[0].id if any(p.id == root_id for p in self.plugins) else None
            raise PluginOrderError(root_id, found)
        self.root_options: Mapping[str, Any] = _freeze(self.plugins[0].options)

    async def generate(
        self,
        *,
        extract_config_files: "bool | None" = None,
        sort_package_json: "bool | None" = None,
    ) -> FileMap:
        """Run all plugins and write the project to disk.

        Args:
            extract_config_files: Move recognized manifest keys into config files.
                Defaults to ``config.extract_config_files``.
            sort_package_json: Canonicalize the manifest key order. Defaults to
                ``config.sort_package_json``.

        Returns:
            The file map that was written.
        """
        if extract_config_files is None:
            extract_config_files = self.config.extract_config_files
        if sort_package_json is None:
            sort_package_json = self.config.sort_package_json

        await self.init_plugins()
        if extract_config_files:
            self.extract_config_files()
        await self.resolve_files()
        if sort_package_json:
            self.sort_pkg()

        self.files[self.config.package_filename] = encode_package(self.pkg)
        logger.debug("Writing %d files to %s", len(self.files), self.context)
        await self.writer(self.context, self.files)
        return self.files

    async def init_plugins(self) -> None:
        """Invoke every plugin's generator entry, one after another."""
        for plugin in self.plugins:
            api = GeneratorAPI(plugin.id, self, plugin.options, self.root_options)
            logger.debug("Applying generator of %s", plugin.id)
            result = plugin.apply(api, plugin.options, self.root_options)
            if inspect.isawaitable(result):
                await result

    def extract_config_files(self) -> None:
        """Write recognized manifest keys to their dedicated config files."""
        for key, transform in self.config_transforms.items():
            if key not in self.pkg:
                continue
            config_file = transform.transform(self.pkg[key])
            self.files[config_file.filename] = _ensure_eol(config_file.content)
            logger.debug("Extracted %r into %s", key, config_file.filename)
            if self.config.prune_extracted_keys:
                del self.pkg[key]

    async def resolve_files(self) -> None:
        """Run the queued file middlewares in registration order."""
        for middleware in self.file_middlewares:
            result = middleware(self.files)
            if inspect.isawaitable(result):
                await result

    def sort_pkg(self) -> None:
        self.pkg = sort_package(self.pkg)

    def print_exit_logs(self, console: "Console") -> None:
        """Print messages plugins queued with ``api.exit_log``."""
        from rich.markup import escape

        for plugin_id, message, level in self.exit_logs:
            style = _EXIT_LOG_STYLES.get(level, "")
            closing = "[/]" if style else ""
            console.print(f"{style}{escape(message)}{closing} [dim]({plugin_id})[/]")
