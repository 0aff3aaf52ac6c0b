from pathlib import Path

__all__ = ("get_template_dir",)


def get_template_dir() -> Path:
    """Get the directory containing the built-in plugin templates.

    Returns:
        Path to the templates directory.
    """
    return Path(__file__).parent / "templates"
