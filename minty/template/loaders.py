"""
Template loaders for ``extends``, ``include`` and ``render_file``.

A loader is any callable ``name -> Optional[str]`` returning the template
source, or None when the template does not exist.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Union

from ..errors import TemplateError

logger = logging.getLogger(__name__)

TemplateLoader = Callable[[str], Optional[str]]
PathLike = Union[str, Path]


class DictLoader:
    """Serves templates from an in-memory mapping."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates: Dict[str, str] = dict(templates)

    def __call__(self, name: str) -> Optional[str]:
        return self.templates.get(name)

    def list_templates(self) -> List[str]:
        return sorted(self.templates)


class FileSystemLoader:
    """
    Loads templates from one or more directories.

    Names are relative POSIX-style paths (``layouts/base.html``); the first
    directory containing the file wins. Names that resolve outside every
    search directory are rejected.
    """

    def __init__(
        self,
        search_path: Union[PathLike, Sequence[PathLike]],
        encoding: str = "utf-8",
        suffix: str = "",
    ):
        if isinstance(search_path, (str, Path)):
            search_path = [search_path]
        self.search_path = [Path(p).resolve() for p in search_path]
        self.encoding = encoding
        self.suffix = suffix

    def __call__(self, name: str) -> Optional[str]:
        for root in self.search_path:
            path = (root / f"{name}{self.suffix}").resolve()
            _ensure_inside(path, root, name)
            if path.is_file():
                logger.debug("Loading template %s from %s", name, path)
                return path.read_text(encoding=self.encoding)
        return None

    def list_templates(self) -> List[str]:
        """Names of all templates under the search path, sorted."""
        found = set()
        for root in self.search_path:
            if not root.is_dir():
                continue
            for path in root.rglob(f"*{self.suffix}"):
                if not path.is_file():
                    continue
                rel = path.relative_to(root).as_posix()
                found.add(rel[: len(rel) - len(self.suffix)] if self.suffix else rel)
        return sorted(found)


def _ensure_inside(path: Path, root: Path, name: str) -> None:
    try:
        path.relative_to(root)
    except ValueError:
        raise TemplateError(f"template name `{name}` escapes the search path") from None


__all__ = ["TemplateLoader", "DictLoader", "FileSystemLoader"]
