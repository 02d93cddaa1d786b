"""Read-only access to a ``KEY=value`` style ``.env`` file."""

from __future__ import annotations

from pathlib import Path


class EnvFile:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self, key: str) -> str:
        return self.read_all().get(key, "")

    def read_all(self) -> dict[str, str]:
        """Parse the file; a missing file yields an empty mapping."""
        if not self.path.is_file():
            return {}
        values: dict[str, str] = {}
        for raw in self.path.read_text(encoding="utf-8").splitlines():
            line = raw.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            if line.startswith("export "):
                line = line[len("export "):]
            key, _, value = line.partition("=")
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            values[key.strip()] = value
        return values
