"""Local JSON state file mapping resource addresses to their last known state."""
from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from .resource_data import ResourceData
from .resources import Resource

STATE_VERSION = 1


def address(type_name: str, name: str) -> str:
    return f"{type_name}.{name}"


def split_address(value: str) -> Tuple[str, str]:
    """Split ``type.name`` into its parts.

    Raises:
        ValueError: If the address has no '.'
    """
    type_name, sep, name = value.partition(".")
    if not sep or not type_name or not name:
        raise ValueError(f"Invalid resource address {value!r}; expected <type>.<name>")
    return type_name, name


class StateFile:
    """Resource state persisted as JSON.

    Layout:
        {"version": 1, "resources": {"<type>.<name>": {"id": ..., "attributes": {...}}}}
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.resources: Dict[str, Dict] = {}

    def load(self) -> "StateFile":
        if self.path.exists():
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if data.get("version") != STATE_VERSION:
                raise ValueError(f"Unsupported state version {data.get('version')!r} in {self.path}")
            self.resources = data.get("resources", {})
        return self

    def save(self) -> None:
        """Write atomically with owner-only permissions (state holds secrets)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump({"version": STATE_VERSION, "resources": self.resources}, f, indent=2, sort_keys=True)
            f.write("\n")
        os.chmod(tmp, 0o600)
        tmp.replace(self.path)

    def get(self, addr: str, resource: Resource) -> Optional[ResourceData]:
        entry = self.resources.get(addr)
        if entry is None:
            return None
        return resource.new_data(entry.get("attributes"), id=entry.get("id", ""))

    def put(self, addr: str, d: ResourceData) -> None:
        """Store ``d``; an empty id removes the address."""
        if not d.id:
            self.remove(addr)
            return
        self.resources[addr] = {"id": d.id, "attributes": d.to_dict()}

    def remove(self, addr: str) -> None:
        self.resources.pop(addr, None)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.resources))

    def __contains__(self, addr: str) -> bool:
        return addr in self.resources
