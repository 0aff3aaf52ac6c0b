"""Generator of the root ``@vue/cli-service`` plugin."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from scaffold_forge.builtin._paths import get_template_dir

if TYPE_CHECKING:
    from scaffold_forge.api import GeneratorAPI

_VUE_VERSIONS = {"2": "^2.7.14", "3": "^3.3.4"}
_PREPROCESSORS = {
    "sass": {"sass": "^1.32.7", "sass-loader": "^12.0.0"},
    "less": {"less": "^4.0.0", "less-loader": "^8.0.0"},
    "stylus": {"stylus": "^0.55.0", "stylus-loader": "^6.1.0"},
}


def generate(api: "GeneratorAPI", options: dict[str, Any], root_options: "Mapping[str, Any]") -> None:
    vue_version = str(options.get("vueVersion", "3"))

    api.render(
        "service",
        {
            "doesCompile": api.has_plugin("babel") or api.has_plugin("typescript"),
            "hasRouter": api.has_plugin("router"),
        },
        base_dir=get_template_dir(),
    )

    api.extend_package(
        {
            "scripts": {
                "serve": "vue-cli-service serve",
                "build": "vue-cli-service build",
            },
            "dependencies": {"vue": _VUE_VERSIONS.get(vue_version, _VUE_VERSIONS["3"])},
            "browserslist": ["> 1%", "last 2 versions", "not dead", *(["not ie 11"] if vue_version == "3" else [])],
            "vue": {"transpileDependencies": True},
        }
    )
    if vue_version == "2":
        api.extend_package({"devDependencies": {"vue-template-compiler": _VUE_VERSIONS["2"]}})

    preprocessor = options.get("cssPreprocessor")
    if preprocessor:
        if preprocessor not in _PREPROCESSORS:
            api.exit_log(f"Unknown CSS preprocessor {preprocessor!r}, no loader was added.", "warn")
        else:
            api.extend_package({"devDependencies": _PREPROCESSORS[preprocessor]})
