"""Manifest key to config file transforms.

Some manifest keys (``babel``, ``vue``, ``eslintConfig``, ...) can be moved out of
``package.json`` into a dedicated JavaScript config file. Each key owns exactly
one :class:`ConfigTransform` describing the file it is written to.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from scaffold_forge.exceptions import UnsupportedConfigFormatError
from scaffold_forge.values import stringify_js

__all__ = (
    "DEFAULT_CONFIG_TRANSFORMS",
    "ROOT_CONFIG_FILES",
    "ConfigFile",
    "ConfigTransform",
)

ROOT_CONFIG_FILES: dict[str, tuple[str, str]] = {
    "vue.config.js": ("@vue/cli-service", "defineConfig"),
}
"""Config files whose export is wrapped in a factory call: filename -> (module, factory)."""


@dataclass(frozen=True)
class ConfigFile:
    """A generated config file."""

    filename: str
    content: str


class ConfigTransform:
    """Turns the value of one manifest key into a config file.

    Args:
        file_descriptor: Maps a file type to its candidate filenames, for example
            ``{"js": ["babel.config.js"]}``. The first type and its first filename
            are the default target.
    """

    supported_type = "js"

    def __init__(self, file_descriptor: "Mapping[str, Sequence[str]]") -> None:
        if not file_descriptor or not all(file_descriptor.values()):
            msg = "A config transform needs at least one file type with a filename"
            raise ValueError(msg)
        self.file_descriptor = {file_type: tuple(names) for file_type, names in file_descriptor.items()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.file_descriptor!r})"

    def get_default_file(self) -> tuple[str, str]:
        """Return the default ``(type, filename)`` pair.

        Returns:
            The first declared type and its first filename.
        """
        file_type = next(iter(self.file_descriptor))
        return file_type, self.file_descriptor[file_type][0]

    def transform(self, value: Any, fmt: "str | None" = None) -> ConfigFile:
        """Build the config file for a manifest value.

        Args:
            value: The manifest value to write.
            fmt: Requested file type. Defaults to the declared type.

        Raises:
            UnsupportedConfigFormatError: If the requested or declared type is not ``js``.

        Returns:
            The target filename and its content.
        """
        file_type, filename = self.get_default_file()
        if fmt is not None and fmt != file_type:
            raise UnsupportedConfigFormatError(fmt, file_type)
        if file_type != self.supported_type:
            raise UnsupportedConfigFormatError(file_type, self.supported_type)
        return ConfigFile(filename=filename, content=self.get_content(value, filename))

    @staticmethod
    def get_content(value: Any, filename: str) -> str:
        """Render the JavaScript module for ``value``.

        Returns:
            The module source, without a trailing newline.
        """
        serialized = stringify_js(value, indent=2)
        if filename in ROOT_CONFIG_FILES:
            module, factory = ROOT_CONFIG_FILES[filename]
            return f"const {{ {factory} }} = require('{module}')\nmodule.exports = {factory}({serialized})"
        return f"module.exports = {serialized}"


DEFAULT_CONFIG_TRANSFORMS: dict[str, ConfigTransform] = {
    "vue": ConfigTransform({"js": ["vue.config.js"]}),
    "babel": ConfigTransform({"js": ["babel.config.js"]}),
    "postcss": ConfigTransform({"js": ["postcss.config.js"]}),
    "eslintConfig": ConfigTransform({"js": [".eslintrc.js"]}),
    "jest": ConfigTransform({"js": ["jest.config.js"]}),
    "lint-staged": ConfigTransform({"js": ["lint-staged.config.js"]}),
}
"""Recognized manifest keys in extraction order."""
