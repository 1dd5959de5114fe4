"""
Artifact store: one ``<name>.compiled.json`` per root contract.

The file holds a single field, ``hex``, with the creation bytecode. Writes go
through a temp file and ``os.replace`` so readers only ever see a complete
artifact or none.
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from scaffold.errors import ArtifactError, ArtifactNotFoundError

ARTIFACT_SUFFIX = ".compiled.json"


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(tmp_fd, "w") as f:
            json.dump(data, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


class ArtifactStore:
    """Reads and writes compiled artifacts under ``build_dir``."""

    def __init__(self, build_dir: Path):
        self.build_dir = Path(build_dir)

    def path_for(self, name: str) -> Path:
        return self.build_dir / f"{name}{ARTIFACT_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def save(self, name: str, code: bytes) -> Path:
        if not code:
            raise ArtifactError(f"Refusing to write an empty artifact for '{name}'")
        path = self.path_for(name)
        write_json_atomic(path, {"hex": bytes(code).hex()})
        return path

    def load(self, name: str) -> bytes:
        path = self.path_for(name)
        if not path.is_file():
            raise ArtifactNotFoundError(f"'{path}' not found, did you build?")
        try:
            with open(path) as f:
                payload = json.load(f)
            hex_code = payload["hex"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ArtifactError(f"'{path}' is not a valid artifact: {e}") from e
        if not isinstance(hex_code, str) or not hex_code:
            raise ArtifactError(f"'{path}' has no bytecode")
        if hex_code.startswith("0x"):
            hex_code = hex_code[2:]
        try:
            return bytes.fromhex(hex_code)
        except ValueError as e:
            raise ArtifactError(f"'{path}' holds malformed hex: {e}") from e

    def delete(self, name: str) -> bool:
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        return True
