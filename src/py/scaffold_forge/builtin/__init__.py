"""Built-in plugin generators.

Generators for the Vue CLI service (the root plugin) and the Babel, ESLint and
Router plugins, together with their template directories.
"""

from scaffold_forge.builtin import babel, eslint, router, service
from scaffold_forge.builtin._paths import get_template_dir
from scaffold_forge.plugins import PluginRegistry

__all__ = ("default_registry", "get_template_dir")


def default_registry() -> PluginRegistry:
    """Create a registry holding every built-in generator.

    Returns:
        A new registry; callers may register additional plugins on it.
    """
    registry = PluginRegistry()
    registry.register("@vue/cli-service", service.generate, link="https://cli.vuejs.org/")
    registry.register("@vue/cli-plugin-babel", babel.generate)
    registry.register("@vue/cli-plugin-eslint", eslint.generate)
    registry.register("@vue/cli-plugin-router", router.generate)
    return registry
