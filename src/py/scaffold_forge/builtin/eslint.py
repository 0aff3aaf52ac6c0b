"""Generator of ``@vue/cli-plugin-eslint``.

Options:
    config: ``base`` (eslint:recommended), ``airbnb``, ``standard`` or ``prettier``.
    lintOn: Any of ``save`` and ``commit``. Linting on commit adds a
        ``lint-staged`` setup running the linter on staged files.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scaffold_forge.api import GeneratorAPI

_CONFIG_EXTENDS = {
    "base": ["eslint:recommended"],
    "airbnb": ["@vue/airbnb"],
    "standard": ["@vue/standard"],
    "prettier": ["eslint:recommended", "plugin:prettier/recommended"],
}
_CONFIG_DEPENDENCIES = {
    "airbnb": {"@vue/eslint-config-airbnb": "^6.0.0", "eslint-plugin-import": "^2.25.3"},
    "standard": {"@vue/eslint-config-standard": "^6.1.0", "eslint-plugin-import": "^2.25.3"},
    "prettier": {"eslint-config-prettier": "^8.3.0", "eslint-plugin-prettier": "^4.0.0", "prettier": "^2.4.1"},
}


def generate(api: "GeneratorAPI", options: dict[str, Any], root_options: "Mapping[str, Any]") -> None:
    config = options.get("config", "base")
    vue3 = str(root_options.get("vueVersion", "3")) == "3"
    vue_extends = "plugin:vue/vue3-essential" if vue3 else "plugin:vue/essential"

    eslint_config: dict[str, Any] = {
        "root": True,
        "env": {"node": True},
        "extends": [vue_extends, *_CONFIG_EXTENDS.get(config, _CONFIG_EXTENDS["base"])],
        "parserOptions": {},
        "rules": {},
    }
    dev_dependencies = {"eslint": "^7.32.0", "eslint-plugin-vue": "^8.0.3", **_CONFIG_DEPENDENCIES.get(config, {})}
    if api.has_plugin("babel"):
        eslint_config["parserOptions"]["parser"] = "@babel/eslint-parser"
        dev_dependencies["@babel/eslint-parser"] = "^7.12.16"

    api.extend_package(
        {
            "scripts": {"lint": "vue-cli-service lint"},
            "eslintConfig": eslint_config,
            "devDependencies": dev_dependencies,
        }
    )

    lint_on = options.get("lintOn") or []
    if "commit" in lint_on:
        api.extend_package(
            {
                "devDependencies": {"lint-staged": "^11.1.2"},
                "gitHooks": {"pre-commit": "lint-staged"},
                "lint-staged": {"*.{js,jsx,vue}": "vue-cli-service lint"},
            }
        )
