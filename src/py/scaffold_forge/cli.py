from pathlib import Path
from typing import Optional

from click import Path as ClickPath
from click import argument, group, option
from rich.console import Console

console = Console(soft_wrap=True)


@group(name="scaffold-forge")
@option("--verbose", help="Enable verbose output.", default=False, is_flag=True)
@option("--quiet", help="Only show errors.", default=False, is_flag=True)
def cli(verbose: "bool", quiet: "bool") -> None:
    """Scaffold projects from plugin templates."""
    import logging

    from rich.logging import RichHandler

    from scaffold_forge.config import LoggingConfig

    config = LoggingConfig(level="verbose" if verbose else "quiet" if quiet else LoggingConfig().level)
    logger = logging.getLogger("scaffold_forge")
    logger.setLevel(config.logging_level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False))


@cli.command(name="create", help="Create a new project.")
@argument("name")
@option(
    "--preset",
    "preset_path",
    type=ClickPath(dir_okay=False, file_okay=True, exists=True, path_type=Path),
    help="JSON file with the resolved project choices.",
    default=None,
    required=False,
)
@option(
    "--plugin",
    "plugin_ids",
    multiple=True,
    help="Plugin to add, may be repeated. Ignored when --preset is given.",
)
@option(
    "--target",
    type=ClickPath(dir_okay=True, file_okay=False, path_type=Path),
    help="Directory to create the project in. Defaults to ./NAME.",
    default=None,
    required=False,
)
@option(
    "--config-files/--in-package",
    "use_config_files",
    default=None,
    help="Place Babel, ESLint, etc. config in dedicated files or in package.json.",
)
@option("--force", help="Overwrite a non-empty target directory.", default=False, is_flag=True)
def create(
    name: str,
    preset_path: "Optional[Path]",
    plugin_ids: "tuple[str, ...]",
    target: "Optional[Path]",
    use_config_files: "Optional[bool]",
    force: "bool",
) -> None:
    """Create a project from a preset."""
    import sys

    import anyio

    from scaffold_forge.creator import DEFAULT_PRESET, Creator, Preset, load_preset
    from scaffold_forge.exceptions import ScaffoldForgeError

    target = Path(target or Path.cwd() / name)
    if target.exists() and any(target.iterdir()) and not force:
        console.print(f"[red]Target directory {target} is not empty. Use --force to overwrite.[/]")
        sys.exit(1)

    try:
        if preset_path is not None:
            preset = load_preset(preset_path)
        elif plugin_ids:
            preset = Preset(plugins={plugin_id: {} for plugin_id in plugin_ids})
        else:
            preset = Preset(plugins=dict(DEFAULT_PRESET.plugins))
        if use_config_files is not None:
            preset.use_config_files = use_config_files

        console.rule(f"[yellow]Creating project {name}[/]", align="left")
        creator = Creator(name, target)
        generator = anyio.run(creator.create, preset)
    except ScaffoldForgeError as e:
        console.print(f"[bold red]Project creation failed: {e!s}[/]")
        sys.exit(1)

    for file_name in sorted(generator.files):
        console.print(f"[green]Created {target / file_name}[/]")
    generator.print_exit_logs(console)
    console.print(f"[bold green]Successfully created project {name}.[/]")
    console.print(f"[dim]  cd {target}\n  npm install\n  npm run serve[/]")
