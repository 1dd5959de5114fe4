from scaffold.build.artifacts import ArtifactStore
from scaffold.build.compiler import CompileResult, SolidityCompiler
from scaffold.build.opcodes import OpCode, crc32, load_ops, parse_ops
from scaffold.build.orchestrator import (
    BuildOrchestrator,
    BuildReport,
    BuiltContract,
    ContractSource,
    discover_contracts,
)

__all__ = [
    "ArtifactStore",
    "CompileResult",
    "SolidityCompiler",
    "OpCode",
    "crc32",
    "load_ops",
    "parse_ops",
    "BuildOrchestrator",
    "BuildReport",
    "BuiltContract",
    "ContractSource",
    "discover_contracts",
]
