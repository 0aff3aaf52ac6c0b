"""Generator of ``@vue/cli-plugin-router``."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from scaffold_forge.builtin._paths import get_template_dir

if TYPE_CHECKING:
    from scaffold_forge.api import GeneratorAPI


def generate(api: "GeneratorAPI", options: dict[str, Any], root_options: "Mapping[str, Any]") -> None:
    vue3 = str(root_options.get("vueVersion", "3")) == "3"
    api.extend_package({"dependencies": {"vue-router": "^4.0.3" if vue3 else "^3.5.1"}})
    api.render(
        "router",
        {
            "historyMode": bool(options.get("historyMode")),
            "doesCompile": api.has_plugin("babel") or api.has_plugin("typescript"),
            "vue3": vue3,
        },
        base_dir=get_template_dir(),
    )
    if options.get("historyMode"):
        api.exit_log("History mode requires the server to fall back to index.html for unknown routes.", "info")
