"""
Solidity compiler adapter (py-solc-x).

Feeds a root contract plus every file under its import search path to
``solc --standard-json`` and returns the creation bytecode, or the compiler
diagnostic as a structured error result.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import solcx
from solcx.exceptions import SolcError

from scaffold.config.settings import BuildSettings

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    status: str  # "ok" or "error"
    code: bytes = b""
    abi: list[dict[str, Any]] = field(default_factory=list)
    contract_name: str | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def error(cls, message: str) -> CompileResult:
        return cls(status="error", message=message)


def source_unit_name(path: Path, base: Path) -> str:
    """Source unit name solc sees: POSIX path relative to ``base`` when possible."""
    path = Path(path).resolve()
    try:
        return path.relative_to(Path(base).resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def collect_sources(
    root: Path,
    import_dirs: Iterable[Path],
    base: Path,
    exclude_dirs: Iterable[Path] = (),
) -> dict[str, str]:
    """Map source unit name -> text for the root and all ``*.sol`` under import_dirs.

    Files under ``exclude_dirs`` (imports dedicated to other contracts) are skipped.
    """
    sources = {source_unit_name(root, base): Path(root).read_text(encoding="utf-8")}
    excluded = [Path(d).resolve() for d in exclude_dirs]
    for import_dir in import_dirs:
        for path in sorted(Path(import_dir).rglob("*.sol")):
            if any(path.resolve().is_relative_to(d) for d in excluded):
                continue
            sources.setdefault(source_unit_name(path, base), path.read_text(encoding="utf-8"))
    return sources


def select_contract(unit_contracts: dict[str, Any], stem: str) -> tuple[str, dict[str, Any]] | None:
    """Contract named like the file (case-insensitive), else the last one with bytecode."""
    for name, data in unit_contracts.items():
        if name.lower() == stem.lower():
            return name, data
    deployable = [
        (name, data)
        for name, data in unit_contracts.items()
        if data.get("evm", {}).get("bytecode", {}).get("object")
    ]
    return deployable[-1] if deployable else None


class SolidityCompiler:
    """Compile root contracts with a pinned solc version."""

    def __init__(self, settings: BuildSettings | None = None, base_path: Path | None = None):
        self.settings = settings or BuildSettings()
        self.base_path = Path(base_path) if base_path is not None else Path.cwd()
        self._installed = False

    def ensure_installed(self) -> None:
        if self._installed:
            return
        version = self.settings.solc_version
        installed = {str(v) for v in solcx.get_installed_solc_versions()}
        if version not in installed:
            logger.info(f" - Installing solc {version}..")
            solcx.install_solc(version)
        self._installed = True

    def standard_input(self, sources: dict[str, str]) -> dict[str, Any]:
        settings: dict[str, Any] = {
            "evmVersion": self.settings.evm_version,
            "outputSelection": {"*": {"*": ["abi", "evm.bytecode.object"]}},
        }
        if self.settings.optimize:
            settings["optimizer"] = {"enabled": True, "runs": self.settings.optimize_runs}
        return {
            "language": "Solidity",
            "sources": {name: {"content": text} for name, text in sources.items()},
            "settings": settings,
        }

    def compile(self, root: Path, import_dirs: Iterable[Path] = (), exclude_dirs: Iterable[Path] = ()) -> CompileResult:
        root = Path(root)
        sources = collect_sources(root, import_dirs, self.base_path, exclude_dirs)
        root_unit = source_unit_name(root, self.base_path)
        logger.debug(f"   compiling {len(sources)} source unit(s): {', '.join(sources)}")

        self.ensure_installed()
        try:
            output = solcx.compile_standard(
                self.standard_input(sources),
                solc_version=self.settings.solc_version,
            )
        except SolcError as e:
            return CompileResult.error(getattr(e, "message", None) or str(e))

        selected = select_contract(output.get("contracts", {}).get(root_unit, {}), root.stem)
        if selected is None:
            return CompileResult.error(f"No deployable contract found in '{root_unit}'")
        name, data = selected
        bytecode = data.get("evm", {}).get("bytecode", {}).get("object", "")
        if not bytecode:
            return CompileResult.error(f"Contract '{name}' in '{root_unit}' has no bytecode (abstract or interface?)")
        if "__$" in bytecode:
            return CompileResult.error(f"Contract '{name}' has unlinked libraries (placeholders present)")
        return CompileResult(
            status="ok",
            code=bytes.fromhex(bytecode.removeprefix("0x")),
            abi=data.get("abi", []),
            contract_name=name,
        )
