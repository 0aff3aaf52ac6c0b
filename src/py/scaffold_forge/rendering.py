"""Template rendering.

Templates are plain files inside a plugin's template directory. Text files are
rendered with Jinja2 using EJS-style delimiters::

    <%= expression %>          interpolation
    <% if options.router %>    control flow (Jinja2 statements)
    <%# comment %>             comment

Binary files (images, fonts, ...) are detected by inspecting their bytes and
copied unchanged.

File names map to output paths segment by segment: a leading ``_`` becomes a
``.`` (``_gitignore`` -> ``.gitignore``) and a leading ``__`` is unescaped to a
single ``_`` (``__keep`` -> ``_keep``).
"""

from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

import anyio
from jinja2 import (
    Environment,
    StrictUndefined,
    TemplateError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)
from jinja2.utils import missing

from scaffold_forge.exceptions import TemplateRenderError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = (
    "collect_template_files",
    "is_binary_content",
    "read_and_render",
    "render_file",
    "render_template",
    "transform_path",
)

_SNIFF_BYTES = 512
_TEXT_CONTROL_BYTES = frozenset({7, 8, 9, 10, 12, 13, 27})
_BINARY_SIGNATURES = (
    b"\x89PNG\r\n\x1a\n",
    b"GIF87a",
    b"GIF89a",
    b"\xff\xd8\xff",
    b"PK\x03\x04",
    b"%PDF-",
    b"wOFF",
    b"wOF2",
    b"\x00\x00\x01\x00",
)


def is_binary_content(content: bytes) -> bool:
    """Decide whether file content is binary by inspecting its leading bytes.

    Content is binary when it starts with a well-known binary signature, contains a
    NUL byte, is not valid UTF-8, or more than 10% of the sniffed bytes are
    non-text control characters.

    Returns:
        True if the content should be copied instead of rendered.
    """
    if not content:
        return False
    if content.startswith(_BINARY_SIGNATURES):
        return True
    head = content[:_SNIFF_BYTES]
    if b"\x00" in head:
        return True
    try:
        content.decode("utf-8")
    except UnicodeDecodeError:
        return True
    suspicious = sum(1 for byte in head if byte < 32 and byte not in _TEXT_CONTROL_BYTES)
    return suspicious / len(head) > 0.1


class _TemplateUndefined(Undefined):
    """Undefined that fails on unknown top-level names.

    Missing keys and attributes of known values stay lenient so templates can
    test optional plugin options with ``<% if options.flag %>``.
    """

    __slots__ = ()

    def __new__(
        cls,
        hint: "str | None" = None,
        obj: Any = missing,
        name: "str | None" = None,
        exc: "type[TemplateRuntimeError]" = UndefinedError,
    ) -> "Undefined":
        if hint is None and obj is missing and name is not None:
            return StrictUndefined(hint=hint, obj=obj, name=name, exc=exc)
        return super().__new__(cls)


def _newline_sequence(source: str) -> str:
    index = source.find("\n")
    if index > 0 and source[index - 1] == "\r":
        return "\r\n"
    return "\n"


def render_template(source: str, context: "Mapping[str, Any]", name: "str | None" = None) -> str:
    """Render template source with the given context.

    Templates are rendered with autoescaping disabled because the output is code
    and configuration files, not HTML. The line ending of the first line is used
    for the whole output, so CRLF templates render to CRLF files.

    Args:
        source: The template text.
        context: Dictionary of template variables.
        name: Template name used in error messages.

    Raises:
        TemplateRenderError: If the template is malformed, references an unknown
            variable or fails while rendering.

    Returns:
        Rendered template content.
    """
    env = Environment(
        block_start_string="<%",
        block_end_string="%>",
        variable_start_string="<%=",
        variable_end_string="%>",
        comment_start_string="<%#",
        comment_end_string="%>",
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        newline_sequence=_newline_sequence(source),  # type: ignore[arg-type]
        undefined=_TemplateUndefined,
        autoescape=False,  # noqa: S701
    )
    try:
        return env.from_string(source).render(**context)
    except TemplateSyntaxError as e:
        raise TemplateRenderError(e.message or str(e), template=name, lineno=e.lineno) from e
    except TemplateError as e:
        raise TemplateRenderError(str(e), template=name) from e
    except Exception as e:
        raise TemplateRenderError(f"{type(e).__name__}: {e}", template=name) from e


def render_file(content: bytes, data: "Mapping[str, Any]", name: "str | None" = None) -> "str | bytes":
    """Render one template file.

    Args:
        content: Raw bytes of the template file.
        data: Template context.
        name: Template name used in error messages.

    Returns:
        The rendered text, or ``content`` unchanged when it is binary.
    """
    if is_binary_content(content):
        return content
    return render_template(content.decode("utf-8"), data, name=name)


def transform_path(raw_path: str) -> str:
    """Map a template-relative path to its output path.

    Returns:
        The output path, using ``/`` separators.
    """
    segments = []
    for segment in PurePosixPath(raw_path).parts:
        if segment.startswith("__"):
            segment = segment[1:]
        elif segment.startswith("_") and len(segment) > 1:
            segment = f".{segment[1:]}"
        segments.append(segment)
    return "/".join(segments)


async def collect_template_files(source: "Path | str") -> list[str]:
    """List every file below a template directory, hidden files included.

    Args:
        source: The template directory.

    Returns:
        Sorted POSIX paths relative to ``source``.
    """
    root = anyio.Path(source)
    files = [path.relative_to(root).as_posix() async for path in root.rglob("*") if await path.is_file()]
    return sorted(files)


async def read_and_render(path: "Path | str", data: "Mapping[str, Any]") -> "str | bytes":
    """Read a template file and render it.

    Returns:
        The rendered text or the raw bytes for binary files.
    """
    content = await anyio.Path(path).read_bytes()
    return render_file(content, data, name=str(path))
