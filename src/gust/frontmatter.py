"""Front-matter parsing for entry files.

An entry starts with a YAML block fenced by ``---`` lines:

    ---
    status: ongoing
    date: 2020-03-01
    desc: Notes on something
    ---
    Body text...
"""

import re
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from .core import Frontmatter
from .errors import FrontmatterError

_FRONTMATTER_RE = re.compile(
    r"\A\ufeff?\s*---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


def split_frontmatter(text: str) -> Optional[str]:
    """Return the raw YAML between the fences, or None if there is no block."""
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None
    return match.group(1)


def parse_frontmatter(text: str, source: Union[str, Path] = "<string>") -> Optional[Frontmatter]:
    """
    Parse the front-matter block of an entry.

    Args:
        text: Full entry text
        source: Where the text came from, for error messages

    Returns:
        Parsed Frontmatter, or None if the entry has no front-matter

    Raises:
        FrontmatterError: If the block is not valid YAML or misses required fields
    """
    raw = split_frontmatter(text)
    if raw is None:
        return None

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise FrontmatterError(source, f"invalid YAML: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(source, f"expected a mapping, got {type(data).__name__}")

    try:
        return Frontmatter.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<root>" for err in e.errors())
        raise FrontmatterError(source, f"invalid fields: {fields}")


def read_frontmatter(path: Path) -> Optional[Frontmatter]:
    """Read and parse the front-matter of an entry file."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise FrontmatterError(path, f"not UTF-8 text ({e.reason})")
    return parse_frontmatter(text, path)
