"""Tests for scaffold_forge.api module."""

from pathlib import Path
from typing import Any

import pytest

from scaffold_forge.api import GeneratorAPI, MergeOptions
from scaffold_forge.config import GeneratorConfig
from scaffold_forge.exceptions import ManifestMergeConflictError
from scaffold_forge.generator import Generator
from scaffold_forge.plugins import Plugin
from tests.conftest import ROOT_ID, CreateTemplateDir, MemoryWriter

pytestmark = pytest.mark.anyio


def _make_generator(
    tmp_path: Path,
    *extra_ids: str,
    pkg: "dict[str, Any] | None" = None,
    config: "GeneratorConfig | None" = None,
) -> Generator:
    plugins = [Plugin(id=ROOT_ID, options={"projectName": "demo"}), *(Plugin(id=i) for i in extra_ids)]
    return Generator(tmp_path, pkg=pkg, plugins=plugins, config=config, writer=MemoryWriter())


def _api(generator: Generator, plugin_id: str = "@vue/cli-plugin-babel", **options: Any) -> GeneratorAPI:
    return GeneratorAPI(plugin_id, generator, options, generator.root_options)


# =====================================================
# extend_package Tests
# =====================================================


def test_extend_package_adds_new_fields(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, pkg={"name": "demo"})

    _api(generator).extend_package({"scripts": {"lint": "vue-cli-service lint"}, "browserslist": ["> 1%"]})

    assert generator.pkg == {"name": "demo", "scripts": {"lint": "vue-cli-service lint"}, "browserslist": ["> 1%"]}


def test_extend_package_last_fragment_wins(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path)

    _api(generator).extend_package({"scripts": {"lint": "a"}})
    _api(generator).extend_package({"scripts": {"lint": "b"}})

    assert generator.pkg["scripts"]["lint"] == "b"


def test_extend_package_disjoint_fragments_are_order_independent(tmp_path: Path) -> None:
    first = {"devDependencies": {"eslint": "^7"}, "scripts": {"lint": "l"}}
    second = {"devDependencies": {"@babel/core": "^7"}, "scripts": {"serve": "s"}}
    forward = _make_generator(tmp_path)
    backward = _make_generator(tmp_path)

    _api(forward).extend_package(first)
    _api(forward).extend_package(second)
    _api(backward).extend_package(second)
    _api(backward).extend_package(first)

    assert forward.pkg == backward.pkg


def test_extend_package_nested_merge_and_array_replace(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, pkg={"eslintConfig": {"env": {"node": True}, "extends": ["a", "b"]}})

    _api(generator).extend_package({"eslintConfig": {"env": {"jest": True}, "extends": ["c"]}})

    assert generator.pkg["eslintConfig"] == {"env": {"node": True, "jest": True}, "extends": ["c"]}


def test_extend_package_primitive_replaces_mapping(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, pkg={"browser": {"./a.js": "./b.js"}})

    _api(generator).extend_package({"browser": "dist/browser.js"})

    assert generator.pkg["browser"] == "dist/browser.js"


def test_extend_package_does_not_alias_fragments(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path)
    fragment = {"babel": {"presets": ["preset"]}}

    _api(generator).extend_package(fragment)
    fragment["babel"]["presets"].append("other")

    assert generator.pkg["babel"] == {"presets": ["preset"]}


def test_extend_package_with_callable(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, pkg={"name": "demo", "scripts": {"serve": "s"}})
    seen: list[dict[str, Any]] = []

    def fields(pkg: dict[str, Any]) -> dict[str, Any]:
        seen.append(pkg)
        pkg["scripts"]["mutated"] = "ignored"
        return {"description": f"{pkg['name']} app"}

    _api(generator).extend_package(fields)

    assert generator.pkg == {"name": "demo", "scripts": {"serve": "s"}, "description": "demo app"}
    assert seen[0]["name"] == "demo"


def test_extend_package_without_merge_replaces(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, pkg={"scripts": {"serve": "s"}})

    _api(generator).extend_package({"scripts": {"build": "b"}}, MergeOptions(merge=False))

    assert generator.pkg["scripts"] == {"build": "b"}


def test_extend_package_prune(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, pkg={"scripts": {"serve": "s", "test": "t"}, "main": "index.js"})

    _api(generator).extend_package({"scripts": {"test": None}, "main": None}, {"prune": True})

    assert generator.pkg == {"scripts": {"serve": "s"}}


def test_extend_package_conflict_policy_error(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, config=GeneratorConfig(merge_conflicts="error"))
    _api(generator).extend_package({"devDependencies": {"x": "1.0.0"}})

    with pytest.raises(ManifestMergeConflictError, match=r"devDependencies\.x"):
        _api(generator).extend_package({"devDependencies": {"x": "2.0.0"}})


def test_extend_package_conflict_policy_error_allows_identical_values(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, config=GeneratorConfig(merge_conflicts="error"))

    _api(generator).extend_package({"devDependencies": {"x": "1.0.0"}, "files": ["dist"]})
    _api(generator).extend_package({"devDependencies": {"x": "1.0.0"}, "files": ["dist"]})

    assert generator.pkg == {"devDependencies": {"x": "1.0.0"}, "files": ["dist"]}


def test_extend_package_conflict_policy_warn(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    generator = _make_generator(tmp_path, config=GeneratorConfig(merge_conflicts="warn"))
    _api(generator).extend_package({"scripts": {"lint": "a"}})

    _api(generator, "@vue/cli-plugin-eslint").extend_package({"scripts": {"lint": "b"}})

    assert generator.pkg["scripts"]["lint"] == "b"
    assert "@vue/cli-plugin-eslint overwrites scripts.lint" in caplog.text


# =====================================================
# has_plugin / plugin data Tests
# =====================================================


def test_has_plugin_short_and_full_ids(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, "@vue/cli-plugin-babel", "vue-cli-plugin-apollo")
    api = _api(generator)

    assert api.has_plugin("babel")
    assert api.has_plugin("@vue/cli-plugin-babel")
    assert api.has_plugin("apollo")
    assert not api.has_plugin("router")


def test_plugins_data_excludes_root(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path, "@vue/cli-plugin-babel")

    assert _api(generator).plugins_data == [
        {"name": "babel", "link": "https://github.com/vuejs/vue-cli/tree/dev/packages/%40vue/cli-plugin-babel"}
    ]


def test_resolve_and_exit_log(tmp_path: Path) -> None:
    generator = _make_generator(tmp_path)
    api = _api(generator)

    api.exit_log("done!", "done")

    assert api.resolve("src", "main.js") == tmp_path / "src" / "main.js"
    assert generator.exit_logs == [("@vue/cli-plugin-babel", "done!", "done")]


# =====================================================
# render Tests
# =====================================================


async def test_render_directory_is_deferred(tmp_path: Path, create_template_dir: CreateTemplateDir) -> None:
    template_dir = create_template_dir("base", {"_env": "KEY=<%= options.key %>"})
    generator = _make_generator(tmp_path)

    _api(generator, key="abc").render(template_dir)

    assert generator.files == {}
    assert len(generator.file_middlewares) == 1
    await generator.resolve_files()
    assert generator.files == {".env": "KEY=abc"}


async def test_render_relative_to_base_dir(tmp_path: Path, create_template_dir: CreateTemplateDir) -> None:
    template_dir = create_template_dir("base", {"src/main.js": "// <%= rootOptions.projectName %>\n"})
    generator = _make_generator(tmp_path)

    _api(generator).render("base", base_dir=template_dir.parent)
    await generator.resolve_files()

    assert generator.files == {"src/main.js": "// demo\n"}


async def test_render_skips_whitespace_only_results(tmp_path: Path, create_template_dir: CreateTemplateDir) -> None:
    template_dir = create_template_dir(
        "base",
        {
            "empty.js": "<% if options.enabled %>content<% endif %>\n  \n",
            "kept.js": "  x  \n",
            "logo.png": b"\x89PNG\r\n\x1a\n",
        },
    )
    generator = _make_generator(tmp_path)

    _api(generator, enabled=False).render(template_dir)
    await generator.resolve_files()

    assert generator.files == {"kept.js": "  x  \n", "logo.png": b"\x89PNG\r\n\x1a\n"}


async def test_render_data_context(tmp_path: Path, create_template_dir: CreateTemplateDir) -> None:
    template_dir = create_template_dir(
        "base",
        {
            "info.txt": (
                "<%= options.flag %> <%= rootOptions.projectName %> <%= extra %>\n"
                "<% for plugin in plugins %><%= plugin.name %>;<% endfor %>\n"
            )
        },
    )
    generator = _make_generator(tmp_path, "@vue/cli-plugin-babel", "@vue/cli-plugin-router")

    _api(generator, flag="on").render(template_dir, {"extra": "more"})
    await generator.resolve_files()

    assert generator.files == {"info.txt": "on demo more\nbabel;router;"}


async def test_render_mapping_source(tmp_path: Path, create_template_dir: CreateTemplateDir) -> None:
    template_dir = create_template_dir("single", {"readme.md": "# <%= rootOptions.projectName %>\n", "blank": " "})
    generator = _make_generator(tmp_path)

    _api(generator).render({"docs/README.md": "readme.md", "blank.txt": "blank"}, base_dir=template_dir)
    await generator.resolve_files()

    assert generator.files == {"docs/README.md": "# demo\n"}


async def test_render_callable_middleware(tmp_path: Path, create_template_dir: CreateTemplateDir) -> None:
    template_dir = create_template_dir("fn", {"main.js": "import App from './<%= name %>.vue'\n"})
    generator = _make_generator(tmp_path)
    generator.files["src/legacy.js"] = "old"

    async def middleware(files: dict[str, "str | bytes"], render_file: Any) -> None:
        del files["src/legacy.js"]
        files["src/main.js"] = await render_file("main.js", {"name": "App"})

    _api(generator).render(middleware, base_dir=template_dir)
    await generator.resolve_files()

    assert generator.files == {"src/main.js": "import App from './App.vue'\n"}


async def test_render_data_is_resolved_at_execution_time(
    tmp_path: Path, create_template_dir: CreateTemplateDir
) -> None:
    template_dir = create_template_dir("late", {"a.txt": "<%= options.value %>"})
    generator = _make_generator(tmp_path)
    options: dict[str, Any] = {"value": "early"}
    api = GeneratorAPI("@vue/cli-plugin-babel", generator, options, generator.root_options)

    api.render(template_dir)
    options["value"] = "late"
    await generator.resolve_files()

    assert generator.files == {"a.txt": "late"}
