"""
Build orchestrator.

Finds every root contract in ``contracts/*.sol`` and, one at a time:
deletes its old artifact, reports op-codes from ``contracts/<name>.tlb``,
compiles it together with ``contracts/imports`` (shared) and
``contracts/imports/<name>`` (dedicated), then writes and verifies the new
artifact. The first compile error aborts the whole build.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from scaffold.build.artifacts import ArtifactStore
from scaffold.build.compiler import CompileResult
from scaffold.build.opcodes import OpCode, load_ops
from scaffold.config.settings import ProjectPaths
from scaffold.errors import ArtifactError, CompilationError

logger = logging.getLogger(__name__)

ROOT_PATTERNS = ("*.sol",)


class Compiler(Protocol):
    def compile(self, root: Path, import_dirs: list[Path], exclude_dirs: list[Path]) -> CompileResult: ...


@dataclass(frozen=True)
class ContractSource:
    path: Path

    @property
    def name(self) -> str:
        return self.path.stem


@dataclass
class BuiltContract:
    name: str
    artifact: Path
    code_size: int
    contract_name: str | None = None
    ops: list[OpCode] = field(default_factory=list)


@dataclass
class BuildReport:
    contracts: list[BuiltContract] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.contracts]


def discover_contracts(contracts_dir: Path) -> list[ContractSource]:
    found: set[Path] = set()
    for pattern in ROOT_PATTERNS:
        found.update(p for p in Path(contracts_dir).glob(pattern) if p.is_file())
    return [ContractSource(p) for p in sorted(found)]


def import_dirs_for(source: ContractSource, imports_dir: Path) -> list[Path]:
    dirs = []
    if imports_dir.is_dir():
        dirs.append(imports_dir)
    dedicated = imports_dir / source.name
    if dedicated.is_dir():
        dirs.append(dedicated)
    return dirs


def foreign_import_dirs(source: ContractSource, roots: list[ContractSource], imports_dir: Path) -> list[Path]:
    """Dedicated import dirs of the other root contracts."""
    return [imports_dir / other.name for other in roots if other.name != source.name]


class BuildOrchestrator:
    def __init__(self, paths: ProjectPaths, compiler: Compiler, store: ArtifactStore | None = None):
        self.paths = paths
        self.compiler = compiler
        self.store = store or ArtifactStore(paths.build_dir)

    def report_ops(self, source: ContractSource) -> list[OpCode]:
        tlb_file = self.paths.contracts_dir / f"{source.name}.tlb"
        ops = load_ops(tlb_file)
        if ops is None:
            logger.warning(
                f" - Warning: TL-B file for contract '{tlb_file}' not found, are your op consts according to standard?"
            )
            return []
        logger.info(f" - TL-B file '{tlb_file}' found, calculating crc32 on all ops..")
        for op in ops:
            logger.info(f"   {op.describe()}")
        return ops

    def build_contract(self, source: ContractSource, roots: list[ContractSource] | None = None) -> BuiltContract:
        name = source.name
        logger.info(f"\n* Found root contract '{source.path}' - let's compile it:")

        if self.store.delete(name):
            logger.info(f" - Deleting old build artifact '{self.store.path_for(name)}'")

        ops = self.report_ops(source)

        logger.info(f" - Trying to compile '{source.path}' with 'solc' compiler..")
        if roots is None:
            roots = discover_contracts(self.paths.contracts_dir)
        result = self.compiler.compile(
            source.path,
            import_dirs_for(source, self.paths.imports_dir),
            exclude_dirs=foreign_import_dirs(source, roots, self.paths.imports_dir),
        )
        if not result.ok:
            logger.error(" - OH NO! Compilation Errors! The compiler output was:")
            logger.error(f"\n{result.message}")
            raise CompilationError(name, result.message)
        logger.info(" - Compilation successful!")

        artifact = self.store.save(name, result.code)
        if not self.store.exists(name):
            logger.error(f" - For some reason '{artifact}' was not created!")
            raise ArtifactError(f"Artifact '{artifact}' was not created")
        logger.info(f" - Build artifact created '{artifact}'")

        return BuiltContract(
            name=name,
            artifact=artifact,
            code_size=len(result.code),
            contract_name=result.contract_name,
            ops=ops,
        )

    def run(self) -> BuildReport:
        logger.info("=================================================================")
        logger.info("Build script running, let's find some Solidity contracts to compile..")

        report = BuildReport()
        sources = discover_contracts(self.paths.contracts_dir)
        if not sources:
            logger.warning(f"\n* No root contracts found in '{self.paths.contracts_dir}'")
        for source in sources:
            report.contracts.append(self.build_contract(source, sources))

        logger.info("")
        return report
