from pathlib import Path
from typing import Iterable, Iterator

from ..core.model import ListingEntry
from ..core.ports import ListingSurface


class FsListing(ListingSurface):
    """
    File listing of a vault directory.

    Indent classes are kept in memory keyed by entry path; render() turns
    them into an indented text tree. With ``show_all`` hidden entries and
    files of any suffix are listed too.
    """

    def __init__(
        self,
        root: Path,
        suffixes: tuple[str, ...] = (".md",),
        show_all: bool = False,
    ):
        self.root = root
        self.suffixes = suffixes
        self.show_all = show_all
        self.classes: dict[str, str] = {}

    def _skip(self, path: Path) -> bool:
        if self.show_all:
            return False
        if path.name.startswith("."):
            return True
        if path.is_file() and path.suffix not in self.suffixes:
            return True
        return False

    def _walk(self, folder: Path) -> Iterator[Path]:
        for p in sorted(folder.iterdir(), key=lambda p: (p.is_file(), p.name.lower())):
            if self._skip(p):
                continue
            yield p
            if p.is_dir():
                yield from self._walk(p)

    def list_entries(self) -> Iterable[ListingEntry]:
        if not self.root.exists():
            return []
        return [
            ListingEntry(
                path=p.relative_to(self.root).as_posix(),
                label=p.stem if p.is_file() and p.suffix in self.suffixes else p.name,
                is_folder=p.is_dir(),
            )
            for p in self._walk(self.root)
        ]

    def apply_indent_class(self, entry: ListingEntry, class_name: str) -> None:
        self.classes[entry.path] = class_name

    def clear_indent_class(self, entry: ListingEntry) -> None:
        self.classes.pop(entry.path, None)

    def render(self, indent: str = "  ") -> Iterator[str]:
        """Yield one line per entry: folder depth plus indent-class depth."""
        for entry in self.list_entries():
            depth = entry.path.count("/")
            class_name = self.classes.get(entry.path)
            if class_name:
                depth += int(class_name.rsplit("-", 1)[1])
            suffix = "/" if entry.is_folder else ""
            yield f"{indent * depth}{entry.label}{suffix}"
