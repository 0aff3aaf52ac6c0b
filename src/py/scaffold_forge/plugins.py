"""Plugin definitions and the generator registry.

A plugin contributes templates and manifest fragments through its generator
entry, a callable invoked as ``apply(api, options, root_options)``. Entries are
looked up in an explicit :class:`PluginRegistry`; nothing is imported by name at
generation time.
"""

import logging
import re
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from scaffold_forge.config import DEFAULT_ROOT_PLUGIN_ID
from scaffold_forge.exceptions import PluginModuleMissingError
from scaffold_forge.manifest import sort_object

if TYPE_CHECKING:
    from scaffold_forge.api import GeneratorAPI

__all__ = (
    "Plugin",
    "PluginEntry",
    "PluginRegistry",
    "get_plugin_link",
    "is_official_plugin",
    "matches_plugin_id",
    "noop_entry",
    "resolve_plugins",
    "to_short_plugin_id",
)

logger = logging.getLogger("scaffold_forge")

PluginEntry = Callable[["GeneratorAPI", dict[str, Any], Mapping[str, Any]], "Awaitable[None] | None"]

_PLUGIN_RE = re.compile(r"^(@vue/|vue-|@[\w-]+(\.)?[\w-]+/vue-)cli-plugin-")
_SCOPE_RE = re.compile(r"^@[\w-]+(\.)?[\w-]+/")
_OFFICIAL_RE = re.compile(r"^@vue/")


def _dict_factory() -> dict[str, Any]:
    return {}


def noop_entry(api: "GeneratorAPI", options: dict[str, Any], root_options: "Mapping[str, Any]") -> None:
    """Generator entry for plugins that ship no generator."""


@dataclass
class Plugin:
    """A plugin taking part in a generation run.

    Attributes:
        id: Full plugin id, e.g. ``@vue/cli-plugin-babel``.
        apply: The generator entry.
        options: Options collected for the plugin.
        link: Documentation link shown in generated files.
    """

    id: str
    apply: PluginEntry = noop_entry
    options: dict[str, Any] = field(default_factory=_dict_factory)
    link: "str | None" = None


def to_short_plugin_id(plugin_id: str) -> str:
    """Strip the ``cli-plugin-`` prefix from a plugin id.

    Returns:
        ``babel`` for ``@vue/cli-plugin-babel``; ids without the prefix are returned as is.
    """
    return _PLUGIN_RE.sub("", plugin_id)


def is_official_plugin(plugin_id: str) -> bool:
    return bool(_OFFICIAL_RE.match(plugin_id))


def matches_plugin_id(candidate: str, full_id: str) -> bool:
    """Check whether ``candidate`` refers to the plugin ``full_id``.

    A plugin can be referenced by its full id, its short id, or a scoped short id:
    ``@vue/cli-plugin-babel``, ``babel`` and ``@vue/babel`` are all equivalent.

    Returns:
        True if the ids refer to the same plugin.
    """
    short = to_short_plugin_id(full_id)
    return full_id == candidate or short == candidate or short == _SCOPE_RE.sub("", candidate)


def get_plugin_link(plugin_id: str, homepage: "str | None" = None) -> str:
    """Build a documentation link for a plugin.

    Returns:
        The link for official plugins, ``homepage`` when given, otherwise the npm page.
    """
    if is_official_plugin(plugin_id):
        return f"https://github.com/vuejs/vue-cli/tree/dev/packages/%40vue/cli-plugin-{to_short_plugin_id(plugin_id)}"
    if homepage:
        return homepage
    return f"https://www.npmjs.com/package/{quote(plugin_id, safe='@')}"


class PluginRegistry:
    """Maps plugin ids to generator entries.

    Entries can be registered directly or with the decorator form::

        registry = PluginRegistry()


        @registry.register("@vue/cli-plugin-babel")
        def babel(api, options, root_options):
            api.extend_package({"babel": {"presets": ["@vue/cli-plugin-babel/preset"]}})
    """

    def __init__(self, entries: "Mapping[str, PluginEntry] | None" = None) -> None:
        self._entries: dict[str, PluginEntry] = dict(entries or {})
        self._links: dict[str, str] = {}

    def __contains__(self, plugin_id: object) -> bool:
        return isinstance(plugin_id, str) and self._find(plugin_id) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def register(
        self,
        plugin_id: str,
        entry: "PluginEntry | None" = None,
        *,
        link: "str | None" = None,
    ) -> "PluginEntry | Callable[[PluginEntry], PluginEntry]":
        """Register a generator entry for a plugin id.

        Returns:
            The entry when given, otherwise a decorator registering the decorated function.
        """

        def decorator(func: PluginEntry) -> PluginEntry:
            self._entries[plugin_id] = func
            if link is not None:
                self._links[plugin_id] = link
            return func

        if entry is not None:
            return decorator(entry)
        return decorator

    def _find(self, plugin_id: str) -> "str | None":
        if plugin_id in self._entries:
            return plugin_id
        return next((known for known in self._entries if matches_plugin_id(plugin_id, known)), None)

    def get(self, plugin_id: str) -> PluginEntry:
        """Look up the generator entry for a plugin.

        Raises:
            PluginModuleMissingError: If no entry is registered for the id.

        Returns:
            The registered entry.
        """
        known = self._find(plugin_id)
        if known is None:
            raise PluginModuleMissingError(plugin_id)
        return self._entries[known]

    def link_for(self, plugin_id: str) -> str:
        known = self._find(plugin_id)
        return get_plugin_link(plugin_id, self._links.get(known) if known else None)


def resolve_plugins(
    raw_plugins: "Mapping[str, Mapping[str, Any] | None]",
    registry: PluginRegistry,
    root_plugin_id: str = DEFAULT_ROOT_PLUGIN_ID,
) -> list[Plugin]:
    """Turn preset plugin options into an ordered plugin list.

    The root plugin is moved to the front, the other plugins keep their order.
    Plugins without a registered generator get a no-op entry.

    Args:
        raw_plugins: Plugin id -> options, in preset order.
        registry: Where generator entries are looked up.
        root_plugin_id: Id of the root plugin.

    Returns:
        The plugins, ready to hand to :class:`~scaffold_forge.generator.Generator`.
    """
    ordered = sort_object(raw_plugins, [root_plugin_id], sort_remaining=False) or {}
    plugins: list[Plugin] = []
    for plugin_id, options in ordered.items():
        try:
            entry = registry.get(plugin_id)
        except PluginModuleMissingError:
            logger.debug("Plugin %s has no generator, skipping its generator step", plugin_id)
            entry = noop_entry
        plugins.append(
            Plugin(id=plugin_id, apply=entry, options=dict(options or {}), link=registry.link_for(plugin_id))
        )
    return plugins
