"""Scaffold-Forge exception classes."""

__all__ = [
    "FileWriteError",
    "ManifestMergeConflictError",
    "PluginModuleMissingError",
    "PluginOrderError",
    "PresetError",
    "ScaffoldForgeError",
    "TemplateRenderError",
    "UnsupportedConfigFormatError",
]


class ScaffoldForgeError(Exception):
    """Base exception for Scaffold-Forge related errors."""


class PluginModuleMissingError(ScaffoldForgeError, LookupError):
    """Raised when no generator is registered for a plugin id."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(f"No generator registered for plugin {plugin_id!r}.")
        self.plugin_id = plugin_id


class PluginOrderError(ScaffoldForgeError):
    """Raised when the root plugin is missing or not the first plugin."""

    def __init__(self, root_plugin_id: str, found: "str | None") -> None:
        if found is None:
            message = f"Root plugin {root_plugin_id!r} is not in the plugin list."
        else:
            message = f"Root plugin {root_plugin_id!r} must be the first plugin, found {found!r} first."
        super().__init__(message)
        self.root_plugin_id = root_plugin_id


class UnsupportedConfigFormatError(ScaffoldForgeError):
    """Raised when a config file is requested in a format other than the supported one."""

    def __init__(self, requested: str, supported: str = "js") -> None:
        super().__init__(
            f"Config format {requested!r} is not supported, only {supported!r} config files can be generated."
        )
        self.requested = requested


class ManifestMergeConflictError(ScaffoldForgeError):
    """Raised when two manifest fragments set different values for the same leaf key."""

    def __init__(self, key_path: "tuple[str, ...]", existing: object, incoming: object) -> None:
        dotted = ".".join(key_path)
        super().__init__(f"Conflicting values for {dotted!r}: {existing!r} != {incoming!r}")
        self.key_path = key_path
        self.existing = existing
        self.incoming = incoming


class TemplateRenderError(ScaffoldForgeError):
    """Raised when a template cannot be rendered."""

    def __init__(self, message: str, template: "str | None" = None, lineno: "int | None" = None) -> None:
        location = ""
        if template is not None:
            location = f" in {template!r}" if lineno is None else f" in {template!r} at line {lineno}"
        super().__init__(f"Template rendering failed{location}: {message}")
        self.template = template
        self.lineno = lineno


class FileWriteError(ScaffoldForgeError, OSError):
    """Raised when the generated file tree cannot be written to disk."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not write {path!r}: {reason}")
        self.path = path


class PresetError(ScaffoldForgeError, ValueError):
    """Raised when a preset cannot be loaded."""
