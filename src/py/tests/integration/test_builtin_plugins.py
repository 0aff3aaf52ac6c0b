"""End-to-end generation with the built-in plugins."""

import json
from pathlib import Path

import pytest

from scaffold_forge.builtin import default_registry, get_template_dir
from scaffold_forge.creator import Creator, Preset

pytestmark = pytest.mark.anyio


async def test_default_project_layout(tmp_path: Path) -> None:
    preset = Preset(plugins={"@vue/cli-plugin-babel": {}, "@vue/cli-plugin-eslint": {"config": "base"}})

    generator = await Creator("hello-world", tmp_path).create(preset)

    assert (tmp_path / ".gitignore").read_text().startswith(".DS_Store")
    assert (tmp_path / "public" / "favicon.ico").read_bytes() == (
        get_template_dir() / "service" / "public" / "favicon.ico"
    ).read_bytes()
    assert (tmp_path / "src" / "assets" / "logo.png").read_bytes().startswith(b"\x89PNG")
    index_html = (tmp_path / "public" / "index.html").read_text()
    assert "<title>hello-world</title>" in index_html
    assert "<%= BASE_URL %>favicon.ico" in index_html
    hello = (tmp_path / "src" / "components" / "HelloWorld.vue").read_text()
    assert "{{ msg }}" in hello
    assert ">babel</a>" in hello
    assert ">eslint</a>" in hello
    assert "createApp(App).mount('#app')" in (tmp_path / "src" / "main.js").read_text()
    assert not (tmp_path / "src" / "router").exists()

    manifest = json.loads((tmp_path / "package.json").read_text())
    assert list(manifest)[:4] == ["name", "version", "private", "scripts"]
    assert list(manifest["scripts"]) == ["serve", "build", "lint"]
    assert manifest["eslintConfig"]["parserOptions"] == {"parser": "@babel/eslint-parser"}
    assert manifest["babel"] == {"presets": ["@vue/cli-plugin-babel/preset"]}
    assert manifest["dependencies"]["vue"].startswith("^3")
    assert generator.exit_logs == []


async def test_router_project_with_config_files(tmp_path: Path) -> None:
    preset = Preset(
        plugins={
            "@vue/cli-plugin-babel": {},
            "@vue/cli-plugin-router": {"historyMode": True},
            "@vue/cli-plugin-eslint": {"config": "prettier", "lintOn": ["save", "commit"]},
        },
        use_config_files=True,
    )

    generator = await Creator("routed", tmp_path, registry=default_registry()).create(preset)

    main_js = (tmp_path / "src" / "main.js").read_text()
    assert "import router from './router'" in main_js
    assert "createApp(App).use(router).mount('#app')" in main_js
    router_js = (tmp_path / "src" / "router" / "index.js").read_text()
    assert "createWebHistory(process.env.BASE_URL)" in router_js
    assert "component: () => import(" in router_js
    assert "<router-view/>" in (tmp_path / "src" / "App.vue").read_text()
    assert "<h1>routed</h1>" in (tmp_path / "src" / "views" / "HomeView.vue").read_text()

    assert (tmp_path / "babel.config.js").read_text() == (
        "module.exports = {\n  presets: [\n    '@vue/cli-plugin-babel/preset'\n  ]\n}\n"
    )
    assert (tmp_path / "vue.config.js").read_text().startswith("const { defineConfig } = require('@vue/cli-service')")
    assert "plugin:prettier/recommended" in (tmp_path / ".eslintrc.js").read_text()
    assert (tmp_path / "lint-staged.config.js").read_text() == (
        "module.exports = {\n  '*.{js,jsx,vue}': 'vue-cli-service lint'\n}\n"
    )

    manifest = json.loads((tmp_path / "package.json").read_text())
    assert manifest["dependencies"]["vue-router"] == "^4.0.3"
    assert manifest["gitHooks"] == {"pre-commit": "lint-staged"}
    assert [level for _, _, level in generator.exit_logs] == ["info"]


async def test_vue2_project(tmp_path: Path) -> None:
    preset = Preset(plugins={"@vue/cli-plugin-router": {}}, vue_version="2", css_preprocessor="sass")

    await Creator("legacy", tmp_path).create(preset)

    main_js = (tmp_path / "src" / "main.js").read_text()
    assert "import Vue from 'vue'" in main_js
    assert "  router,\n" in main_js
    assert "new VueRouter({\n  routes\n})" in (tmp_path / "src" / "router" / "index.js").read_text()
    manifest = json.loads((tmp_path / "package.json").read_text())
    assert manifest["devDependencies"]["vue-template-compiler"].startswith("^2")
    assert "sass-loader" in manifest["devDependencies"]
    assert "not ie 11" not in manifest["browserslist"]
