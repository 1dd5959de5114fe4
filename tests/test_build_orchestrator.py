import logging

import pytest
import solcx
from solcx.exceptions import SolcError

from scaffold.build.artifacts import ArtifactStore
from scaffold.build.compiler import CompileResult, SolidityCompiler
from scaffold.build.orchestrator import (
    BuildOrchestrator,
    ContractSource,
    discover_contracts,
    foreign_import_dirs,
    import_dirs_for,
)
from scaffold.config.settings import BuildSettings, ProjectPaths
from scaffold.errors import CompilationError


class FakeCompiler:
    def __init__(self, failures=()):
        self.failures = set(failures)
        self.calls = []

    def compile(self, root, import_dirs, exclude_dirs=()):
        self.calls.append((root.stem, list(import_dirs), list(exclude_dirs)))
        if root.stem in self.failures:
            return CompileResult.error(f"{root.name}:1:1: ParserError")
        return CompileResult(status="ok", code=b"\x60\x80", contract_name=root.stem.capitalize())


@pytest.fixture
def paths(tmp_path):
    contracts = tmp_path / "contracts"
    (contracts / "imports").mkdir(parents=True)
    for name in ("alpha", "beta"):
        (contracts / f"{name}.sol").write_text("contract X {}\n")
    (contracts / "imports" / "Lib.sol").write_text("library Lib {}\n")
    return ProjectPaths(root=tmp_path)


def test_discover_contracts_sorted_roots_only(paths):
    names = [s.name for s in discover_contracts(paths.contracts_dir)]
    assert names == ["alpha", "beta"]


def test_import_dirs(paths):
    (paths.imports_dir / "alpha").mkdir()
    assert import_dirs_for(ContractSource(paths.contracts_dir / "alpha.sol"), paths.imports_dir) == [
        paths.imports_dir,
        paths.imports_dir / "alpha",
    ]
    assert import_dirs_for(ContractSource(paths.contracts_dir / "beta.sol"), paths.imports_dir) == [paths.imports_dir]


def test_build_writes_artifacts(paths):
    report = BuildOrchestrator(paths, FakeCompiler()).run()
    store = ArtifactStore(paths.build_dir)
    assert report.names == ["alpha", "beta"]
    assert store.load("alpha") == b"\x60\x80"
    assert report.contracts[0].code_size == 2
    assert report.contracts[0].contract_name == "Alpha"


def test_first_failure_aborts(paths):
    compiler = FakeCompiler(failures={"alpha"})
    with pytest.raises(CompilationError) as exc:
        BuildOrchestrator(paths, compiler).run()
    assert exc.value.contract == "alpha"
    assert "ParserError" in exc.value.message
    assert [c[0] for c in compiler.calls] == ["alpha"]
    assert not ArtifactStore(paths.build_dir).exists("beta")


def test_stale_artifact_removed_on_failure(paths):
    store = ArtifactStore(paths.build_dir)
    store.save("alpha", b"\x01")
    with pytest.raises(CompilationError):
        BuildOrchestrator(paths, FakeCompiler(failures={"alpha"}), store).run()
    assert not store.exists("alpha")


def test_missing_tlb_warns(paths, caplog):
    with caplog.at_level(logging.INFO, logger="scaffold"):
        BuildOrchestrator(paths, FakeCompiler()).run()
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any("TL-B file for contract" in r.getMessage() for r in warnings)


def test_tlb_ops_reported(paths, caplog):
    (paths.contracts_dir / "alpha.tlb").write_text("increment query_id:uint64 = InternalMsgBody\n")
    with caplog.at_level(logging.INFO, logger="scaffold"):
        report = BuildOrchestrator(paths, FakeCompiler()).run()
    assert [op.name for op in report.contracts[0].ops] == ["increment"]
    assert "op 'increment'" in caplog.text


def test_no_contracts(tmp_path):
    paths = ProjectPaths(root=tmp_path)
    assert BuildOrchestrator(paths, FakeCompiler()).run().contracts == []


def test_foreign_import_dirs(paths):
    roots = discover_contracts(paths.contracts_dir)
    assert foreign_import_dirs(roots[0], roots, paths.imports_dir) == [paths.imports_dir / "beta"]


def test_dedicated_imports_stay_with_their_contract(paths, monkeypatch):
    dedicated = paths.imports_dir / "beta"
    dedicated.mkdir()
    (dedicated / "BetaOnly.sol").write_text("pragma solidity 0.4.0; contract BetaOnly {\n")
    units = {}

    def fake_compile_standard(input_data, **kwargs):
        sources = list(input_data["sources"])
        units[sources[0]] = sources
        if "contracts/imports/beta/BetaOnly.sol" in sources and sources[0] != "contracts/beta.sol":
            raise SolcError("BetaOnly.sol: ParserError")
        bytecode = {"abi": [], "evm": {"bytecode": {"object": "6080"}}}
        return {"contracts": {sources[0]: {"X": bytecode}}}

    monkeypatch.setattr(solcx, "compile_standard", fake_compile_standard)
    compiler = SolidityCompiler(BuildSettings(), base_path=paths.root)
    compiler._installed = True

    report = BuildOrchestrator(paths, compiler).run()

    assert report.names == ["alpha", "beta"]
    assert units["contracts/alpha.sol"] == ["contracts/alpha.sol", "contracts/imports/Lib.sol"]
    assert "contracts/imports/beta/BetaOnly.sol" in units["contracts/beta.sol"]
