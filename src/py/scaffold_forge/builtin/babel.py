"""Generator of ``@vue/cli-plugin-babel``."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scaffold_forge.api import GeneratorAPI


def generate(api: "GeneratorAPI", options: dict[str, Any], root_options: "Mapping[str, Any]") -> None:
    api.extend_package(
        {
            "babel": {"presets": ["@vue/cli-plugin-babel/preset"]},
            "dependencies": {"core-js": "^3.8.3"},
            "devDependencies": {"@babel/core": "^7.12.16"},
        }
    )
