"""The API handed to plugin generators.

Each plugin gets its own :class:`GeneratorAPI`. Through it the plugin queues
template rendering and merges fragments into the shared ``package.json`` draft.
All state lives on the :class:`~scaffold_forge.generator.Generator`; the API
only mutates it through the operations below.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from scaffold_forge.exceptions import ManifestMergeConflictError
from scaffold_forge.manifest import copy_value, deep_merge, is_object
from scaffold_forge.plugins import get_plugin_link, matches_plugin_id, to_short_plugin_id
from scaffold_forge.rendering import collect_template_files, read_and_render, transform_path

if TYPE_CHECKING:
    from scaffold_forge.generator import FileMap, Generator

__all__ = ("FileMiddleware", "GeneratorAPI", "MergeOptions", "RenderFile")

logger = logging.getLogger("scaffold_forge")

RenderFile = Callable[["Path | str", "Mapping[str, Any] | None"], Awaitable["str | bytes"]]
FileMiddleware = Callable[["FileMap"], "Awaitable[None] | None"]
ExitLogLevel = Literal["log", "info", "done", "warn", "error"]


@dataclass(frozen=True)
class MergeOptions:
    """Options for :meth:`GeneratorAPI.extend_package`.

    Attributes:
        merge: Deep-merge mappings into existing values. When False every field
            replaces the existing value outright.
        prune: Remove keys whose merged value is ``None``.
    """

    merge: bool = True
    prune: bool = False


def _has_content(rendered: "str | bytes") -> bool:
    return isinstance(rendered, bytes) or bool(rendered.strip())


def _prune(value: Any) -> Any:
    if not is_object(value):
        return value
    return {key: _prune(item) for key, item in value.items() if item is not None}


class GeneratorAPI:
    """Per-plugin facade over a running :class:`~scaffold_forge.generator.Generator`.

    Args:
        id: The plugin id.
        generator: The generator owning the manifest draft and file map.
        options: The plugin's own options.
        root_options: Options of the root plugin, shared by all plugins.
    """

    def __init__(
        self,
        id: str,  # noqa: A002
        generator: "Generator",
        options: "Mapping[str, Any]",
        root_options: "Mapping[str, Any]",
    ) -> None:
        self.id = id
        self.generator = generator
        self.options = options
        self.root_options = root_options
        self.plugins_data = [
            {"name": to_short_plugin_id(plugin.id), "link": plugin.link or get_plugin_link(plugin.id)}
            for plugin in generator.plugins
            if plugin.id != generator.config.root_plugin_id
        ]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"

    @property
    def context(self) -> Path:
        """The directory the project is generated into."""
        return self.generator.context

    def resolve(self, *parts: str) -> Path:
        """Resolve a path inside the generated project.

        Returns:
            The absolute target path.
        """
        return self.context.joinpath(*parts)

    def has_plugin(self, id: str) -> bool:  # noqa: A002
        """Check whether a plugin takes part in this run.

        Args:
            id: Full or short plugin id (``@vue/cli-plugin-router``, ``router``).

        Returns:
            True if a matching plugin is registered.
        """
        return any(matches_plugin_id(id, plugin.id) for plugin in self.generator.plugins)

    def extend_package(
        self,
        fields: "Mapping[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any]]",
        options: "MergeOptions | Mapping[str, Any] | None" = None,
    ) -> None:
        """Merge fields into the ``package.json`` draft.

        Mappings merge recursively into existing mappings, with incoming leaves
        winning. Any other value, arrays included, replaces the existing one.

        Args:
            fields: The fragment, or a callable receiving a copy of the current
                draft and returning the fragment.
            options: Merge options.

        Raises:
            ManifestMergeConflictError: When the ``error`` conflict policy is set
                and a leaf would be overwritten with a different value.
        """
        if not isinstance(options, MergeOptions):
            options = MergeOptions(**(options or {}))
        pkg = self.generator.pkg
        if callable(fields):
            fields = fields(deep_merge({}, pkg))

        for key, value in fields.items():
            existing = pkg.get(key)
            if options.merge and is_object(existing) and is_object(value):
                merged = deep_merge(existing, value, on_conflict=self._on_conflict, path=(key,))
            else:
                if key in pkg and existing != value:
                    self._on_conflict((key,), existing, value)
                merged = copy_value(value)
            if options.prune:
                if merged is None:
                    pkg.pop(key, None)
                    continue
                merged = _prune(merged)
            pkg[key] = merged

    def _on_conflict(self, key_path: "tuple[str, ...]", existing: Any, incoming: Any) -> None:
        policy = self.generator.config.merge_conflicts
        if policy == "error":
            raise ManifestMergeConflictError(key_path, existing, incoming)
        if policy == "warn":
            logger.warning(
                "Plugin %s overwrites %s: %r -> %r",
                self.id,
                ".".join(key_path),
                existing,
                incoming,
            )

    def render(
        self,
        source: "str | Path | Mapping[str, str | Path] | Callable[..., Any]",
        additional_data: "Mapping[str, Any] | None" = None,
        *,
        base_dir: "str | Path | None" = None,
    ) -> None:
        """Queue template rendering.

        Nothing is rendered until the generator resolves its files; queued work runs
        in registration order, so a later render wins when two target the same path.

        Args:
            source: One of

                - a template directory; every file below it is rendered to its
                  transformed path (``_gitignore`` -> ``.gitignore``)
                - a mapping of target path to template file
                - a callable ``middleware(files, render_file)`` working on the file
                  map directly
            additional_data: Extra template variables.
            base_dir: Directory relative ``source`` paths are resolved against.
                Defaults to the current working directory.
        """
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        extra = dict(additional_data or {})

        if callable(source) and not isinstance(source, Mapping):
            middleware = source

            async def _callable_middleware(files: "FileMap") -> None:
                data = self._resolve_data(extra)

                async def _render_file(path: "Path | str", more: "Mapping[str, Any] | None" = None) -> "str | bytes":
                    return await read_and_render(base / path, {**data, **(more or {})})

                result = middleware(files, _render_file)
                if inspect.isawaitable(result):
                    await result

            self._inject_file_middleware(_callable_middleware)
            return

        if isinstance(source, Mapping):
            targets = {str(target): base / template for target, template in source.items()}

            async def _mapping_middleware(files: "FileMap") -> None:
                data = self._resolve_data(extra)
                for target, template in targets.items():
                    rendered = await read_and_render(template, data)
                    if _has_content(rendered):
                        files[target] = rendered

            self._inject_file_middleware(_mapping_middleware)
            return

        template_dir = base / source

        async def _directory_middleware(files: "FileMap") -> None:
            data = self._resolve_data(extra)
            for raw_path in await collect_template_files(template_dir):
                rendered = await read_and_render(template_dir / raw_path, data)
                if _has_content(rendered):
                    files[transform_path(raw_path)] = rendered

        self._inject_file_middleware(_directory_middleware)

    def exit_log(self, message: str, level: ExitLogLevel = "log") -> None:
        """Queue a message to be shown once generation has finished."""
        self.generator.exit_logs.append((self.id, message, level))

    def _resolve_data(self, additional_data: "Mapping[str, Any]") -> dict[str, Any]:
        return {
            "options": self.options,
            "rootOptions": self.root_options,
            "plugins": self.plugins_data,
            **additional_data,
        }

    def _inject_file_middleware(self, middleware: FileMiddleware) -> None:
        logger.debug("Plugin %s queued file middleware #%d", self.id, len(self.generator.file_middlewares) + 1)
        self.generator.file_middlewares.append(middleware)
