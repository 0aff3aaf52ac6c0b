from collections.abc import Callable, Generator, Mapping
from pathlib import Path

import pytest

from scaffold_forge.plugins import Plugin

# Environment variables that may affect test behavior - clear before each test
_SCAFFOLD_ENV_VARS = [
    "SCAFFOLD_FORGE_EXTRACT_CONFIG_FILES",
    "SCAFFOLD_FORGE_SORT_PACKAGE_JSON",
    "SCAFFOLD_FORGE_PRUNE_EXTRACTED",
    "SCAFFOLD_FORGE_MERGE_CONFLICTS",
    "SCAFFOLD_FORGE_LOG_LEVEL",
]

ROOT_ID = "@vue/cli-service"

CreateTemplateDir = Callable[[str, "Mapping[str, str | bytes]"], Path]


@pytest.fixture(autouse=True)
def clean_scaffold_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear Scaffold-Forge environment variables before each test for isolation."""
    for var in _SCAFFOLD_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def create_template_dir(tmp_path: Path) -> CreateTemplateDir:
    """Create a template directory from a mapping of relative path to content."""

    def _create(name: str, files: "Mapping[str, str | bytes]") -> Path:
        root = tmp_path / "templates" / name
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _create


class MemoryWriter:
    """Filesystem writer double recording what would be written."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, dict[str, "str | bytes"]]] = []

    async def __call__(self, target_dir: Path, files: "Mapping[str, str | bytes]") -> None:
        self.calls.append((target_dir, dict(files)))

    @property
    def files(self) -> dict[str, "str | bytes"]:
        assert len(self.calls) == 1
        return self.calls[0][1]


@pytest.fixture
def memory_writer() -> MemoryWriter:
    return MemoryWriter()


@pytest.fixture
def root_plugin() -> Plugin:
    return Plugin(id=ROOT_ID, options={"projectName": "demo"})
