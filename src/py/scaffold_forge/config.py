"""Generator and logging configuration.

Every field can be set explicitly; unset fields fall back to environment
variables and then to the built-in defaults.

Precedence: explicit config > env var > default
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Literal

__all__ = (
    "DEFAULT_PACKAGE_FILENAME",
    "DEFAULT_ROOT_PLUGIN_ID",
    "TRUE_VALUES",
    "GeneratorConfig",
    "LoggingConfig",
    "MergeConflictPolicy",
)

TRUE_VALUES = {"True", "true", "1", "yes", "Y", "T"}
DEFAULT_ROOT_PLUGIN_ID = "@vue/cli-service"
DEFAULT_PACKAGE_FILENAME = "package.json"

MergeConflictPolicy = Literal["ignore", "warn", "error"]

logger = logging.getLogger("scaffold_forge")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value in TRUE_VALUES


def get_default_merge_policy() -> MergeConflictPolicy:
    """Get the manifest merge conflict policy from the environment.

    Checks the SCAFFOLD_FORGE_MERGE_CONFLICTS environment variable.
    Falls back to "ignore" (last writer wins, silently) if not set or invalid.

    Returns:
        The merge conflict policy.
    """
    env_policy = os.getenv("SCAFFOLD_FORGE_MERGE_CONFLICTS", "").lower()
    match env_policy:
        case "ignore" | "warn" | "error":
            return env_policy
        case "":
            return "ignore"
        case _:
            logger.warning("Ignoring invalid SCAFFOLD_FORGE_MERGE_CONFLICTS value %r", env_policy)
            return "ignore"


def get_default_log_level() -> "Literal['quiet', 'normal', 'verbose']":
    """Get default log level from environment variable.

    Checks SCAFFOLD_FORGE_LOG_LEVEL environment variable.
    Falls back to "normal" if not set or invalid.

    Returns:
        The log level from environment or "normal" default.
    """
    env_level = os.getenv("SCAFFOLD_FORGE_LOG_LEVEL", "").lower()
    match env_level:
        case "quiet" | "normal" | "verbose":
            return env_level
        case _:
            return "normal"


@dataclass
class GeneratorConfig:
    """Configuration for a generation run.

    Attributes:
        extract_config_files: Move recognized manifest keys (``babel``, ``vue``, ...)
            into dedicated config files. Env: SCAFFOLD_FORGE_EXTRACT_CONFIG_FILES.
        sort_package_json: Canonicalize key order of the generated manifest.
            Env: SCAFFOLD_FORGE_SORT_PACKAGE_JSON.
        prune_extracted_keys: Remove a manifest key once it was written to its own
            config file. Off by default, the key then stays in both places.
            Env: SCAFFOLD_FORGE_PRUNE_EXTRACTED.
        merge_conflicts: What ``extend_package`` does when two fragments set different
            values for the same leaf.
            - "ignore": last fragment wins silently (default)
            - "warn": last fragment wins, a warning is logged
            - "error": raise ``ManifestMergeConflictError``
        root_plugin_id: Id of the plugin whose options become the shared root options.
        package_filename: Name of the serialized manifest in the file map.
    """

    extract_config_files: bool = field(
        default_factory=lambda: _env_flag("SCAFFOLD_FORGE_EXTRACT_CONFIG_FILES", False)
    )
    sort_package_json: bool = field(default_factory=lambda: _env_flag("SCAFFOLD_FORGE_SORT_PACKAGE_JSON", True))
    prune_extracted_keys: bool = field(default_factory=lambda: _env_flag("SCAFFOLD_FORGE_PRUNE_EXTRACTED", False))
    merge_conflicts: MergeConflictPolicy = field(default_factory=get_default_merge_policy)
    root_plugin_id: str = DEFAULT_ROOT_PLUGIN_ID
    package_filename: str = DEFAULT_PACKAGE_FILENAME

    def __post_init__(self) -> None:
        if self.merge_conflicts not in {"ignore", "warn", "error"}:
            msg = f"merge_conflicts must be one of 'ignore', 'warn' or 'error', got {self.merge_conflicts!r}"
            raise ValueError(msg)


@dataclass
class LoggingConfig:
    """Logging configuration for console output.

    Attributes:
        level: Logging verbosity level.
            - "quiet": Minimal output (errors only)
            - "normal": Standard operational messages (default)
            - "verbose": Detailed debugging information
            Can also be set via SCAFFOLD_FORGE_LOG_LEVEL environment variable.
    """

    level: "Literal['quiet', 'normal', 'verbose']" = field(default_factory=get_default_log_level)

    @property
    def logging_level(self) -> int:
        """Map the verbosity level onto a :mod:`logging` level.

        Returns:
            The numeric logging level.
        """
        return {"quiet": logging.ERROR, "normal": logging.INFO, "verbose": logging.DEBUG}[self.level]
