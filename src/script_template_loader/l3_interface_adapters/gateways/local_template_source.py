"""Gateway: local file system template source — implements TemplateSource port."""

from __future__ import annotations

from pathlib import Path

from script_template_loader.l2_use_cases.utils.path_utils import normalize_path


class LocalTemplateSource:
    """Reads the template directory straight from disk. Listing is non-recursive and sorted by name."""

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def is_directory(self, path: str) -> bool:
        return Path(path).is_dir()

    def list_entries(self, path: str) -> list[str]:
        return [normalize_path(str(p)) for p in sorted(Path(path).iterdir()) if p.is_file()]

    def read_all(self, path: str) -> bytes:
        return Path(path).read_bytes()
