"""Tests for the run orchestration."""
import json
import time
from pathlib import Path

import pytest

from compat_lint.config import Config, RestrictedImport
from compat_lint.detector import analyze_source
from compat_lint.errors import MalformedSyntaxError
from compat_lint.orchestrator import (
    analyze_file,
    run_linter,
    run_linter_from_module_list,
    run_linter_on_tree,
)
from compat_lint.package_version import PackageVersionLookup
from compat_lint.restrictions import RestrictionTable
from compat_lint.types import ViolationKind


def make_config(**overrides) -> Config:
    values = {
        "restricted_imports": [
            RestrictedImport(module="react-dom", imports=["findDOMNode", "render"])
        ],
        "show_progress": False,
        "max_workers": 4,
    }
    values.update(overrides)
    return Config(**values)


def write_package(root: Path, name: str, version: str, files: dict[str, str]) -> Path:
    package_dir = root / "node_modules" / name
    package_dir.mkdir(parents=True, exist_ok=True)
    (package_dir / "package.json").write_text(json.dumps({"name": name, "version": version}))
    for rel_path, content in files.items():
        file_path = package_dir / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
    return package_dir


def test_end_to_end_direct_import(tmp_path, monkeypatch):
    """Test a named import on line 3 is attributed to its package."""
    monkeypatch.chdir(tmp_path)
    write_package(
        tmp_path,
        "react-dom",
        "18.3.1",
        {"cjs/x.js": "// react-dom\n// build\nimport { findDOMNode } from 'react-dom';\n"},
    )
    config = make_config(
        restricted_imports=[RestrictedImport(module="react-dom", imports=["findDOMNode"])]
    )

    result, metrics = run_linter(
        ["node_modules/react-dom/cjs/x.js"], config, version_lookup=PackageVersionLookup()
    )

    assert len(result.packages) == 1
    package = result.packages[0]
    assert package.identity.name == "react-dom"
    assert package.identity.version == "18.3.1"
    assert len(package.files) == 1
    assert package.files[0].file_path == "cjs/x.js"
    violations = package.files[0].violations
    assert len(violations) == 1
    assert violations[0].kind == ViolationKind.DIRECT
    assert violations[0].symbol == "findDOMNode"
    assert (violations[0].line, violations[0].column) == (3, 1)
    assert result.is_compliant is False
    assert metrics.total_files_collected == 1
    assert metrics.files_analyzed == 1
    assert metrics.total_violations == 1


def test_end_to_end_destructure_added(tmp_path, monkeypatch):
    """Test a destructured namespace binding adds a second violation in order."""
    monkeypatch.chdir(tmp_path)
    source = (
        "// react-dom\n"
        "// build\n"
        "import { findDOMNode } from 'react-dom';\n"
        "import * as ReactDOM from 'react-dom';\n"
        "const { render } = ReactDOM;\n"
    )
    write_package(tmp_path, "react-dom", "18.3.1", {"cjs/x.js": source})

    result, _ = run_linter(
        ["node_modules/react-dom/cjs/x.js"], make_config(), version_lookup=PackageVersionLookup()
    )

    violations = result.packages[0].files[0].violations
    assert [(v.kind, v.symbol, v.line) for v in violations] == [
        (ViolationKind.DIRECT, "findDOMNode", 3),
        (ViolationKind.DESTRUCTURE, "render", 5),
    ]


def test_allow_list_makes_run_compliant(tmp_path):
    """Test allowed packages keep violations but stay compliant."""
    package_dir = write_package(
        tmp_path, "legacy-ui", "1.0.0", {"index.js": "import { render } from 'react-dom';"}
    )

    result, _ = run_linter(
        [str(package_dir / "index.js")],
        make_config(),
        allow_list=["legacy-ui"],
        version_lookup=PackageVersionLookup(),
    )

    assert len(result.packages) == 1
    assert result.is_compliant is True


def test_config_allowed_packages(tmp_path):
    """Test allowed packages from config are honoured."""
    package_dir = write_package(
        tmp_path, "legacy-ui", "1.0.0", {"index.js": "import { render } from 'react-dom';"}
    )

    result, _ = run_linter(
        [str(package_dir / "index.js")],
        make_config(allowed_packages=["legacy-ui"]),
        version_lookup=PackageVersionLookup(),
    )

    assert result.is_compliant is True


def test_many_files_keep_input_order(tmp_path):
    """Test concurrent analysis returns files in input order."""
    files = {f"lib/f{i:02d}.js": "const { render } = require('react-dom');" for i in range(20)}
    package_dir = write_package(tmp_path, "legacy-ui", "1.0.0", files)
    paths = [str(package_dir / rel) for rel in sorted(files)]

    result, metrics = run_linter(paths, make_config(), version_lookup=PackageVersionLookup())

    assert [f.file_path for f in result.packages[0].files] == sorted(files)
    assert metrics.manifest_lookups == 20
    assert metrics.manifest_cache_hits == 19


def test_unreadable_and_malformed_files_are_reported(tmp_path):
    """Test per-file failures do not hide violations in other files."""
    package_dir = write_package(
        tmp_path,
        "mixed",
        "1.0.0",
        {
            "good.js": "import { findDOMNode } from 'react-dom';",
            "broken.js": "import { from 'react-dom'\nconst = ;",
        },
    )
    paths = [
        str(package_dir / "good.js"),
        str(package_dir / "broken.js"),
        str(package_dir / "missing.js"),
    ]

    result, metrics = run_linter(paths, make_config(), version_lookup=PackageVersionLookup())

    assert len(result.packages) == 1
    assert {e.kind for e in result.errors} == {"syntax", "read"}
    assert metrics.files_failed == 2
    assert metrics.files_analyzed == 1


def test_fail_fast_raises(tmp_path):
    """Test fail_fast aborts on the first broken file."""
    package_dir = write_package(tmp_path, "mixed", "1.0.0", {"broken.js": "const = ;"})

    with pytest.raises(MalformedSyntaxError):
        run_linter([str(package_dir / "broken.js")], make_config(fail_fast=True))


def test_oversized_files_are_skipped(tmp_path):
    """Test files above the size limit are skipped and counted."""
    big = "// padding\n" * 20000 + "import { render } from 'react-dom';\n"
    package_dir = write_package(tmp_path, "bundle", "1.0.0", {"dist/big.js": big})

    result, metrics = run_linter(
        [str(package_dir / "dist" / "big.js")], make_config(max_file_size_mb=0.1)
    )

    assert result.packages == []
    assert metrics.files_skipped == 1


def test_non_dependency_files_are_filtered(tmp_path):
    """Test project sources, type declarations and other assets are ignored."""
    package_dir = write_package(
        tmp_path,
        "typed",
        "1.0.0",
        {"index.d.ts": "export declare function render(): void;", "style.css": "a {}"},
    )
    project_file = tmp_path / "src" / "app.js"
    project_file.parent.mkdir()
    project_file.write_text("import { render } from 'react-dom';")

    result, metrics = run_linter(
        [str(project_file), str(package_dir / "index.d.ts"), str(package_dir / "style.css")],
        make_config(),
    )

    assert metrics.total_files_collected == 0
    assert result.packages == []
    assert result.is_compliant is True


def test_progress_bar_path(tmp_path, monkeypatch):
    """Test analysis with the progress bar enabled."""
    monkeypatch.delenv("COMPAT_LINT_NO_PROGRESS", raising=False)
    package_dir = write_package(
        tmp_path, "legacy-ui", "1.0.0", {"index.js": "ReactDOM.render();"}
    )

    result, metrics = run_linter([str(package_dir / "index.js")], make_config(show_progress=True))

    assert result.packages == []
    assert metrics.files_analyzed == 1


def test_run_from_module_list(tmp_path):
    """Test the modules list JSON file drives the run."""
    package_dir = write_package(
        tmp_path, "legacy-ui", "1.0.0", {"index.js": "import { render } from 'react-dom';"}
    )
    list_path = tmp_path / "modules.json"
    list_path.write_text(json.dumps([str(package_dir / "index.js")]))

    result, _ = run_linter_from_module_list(list_path, make_config())

    assert [p.identity.name for p in result.packages] == ["legacy-ui"]


def test_run_on_tree(tmp_path):
    """Test scanning a directory finds dependency files."""
    write_package(tmp_path, "legacy-ui", "1.0.0", {"lib/index.js": "ReactDOM.render();"})
    write_package(
        tmp_path, "@scope/old", "0.9.0", {"index.mjs": "import { findDOMNode } from 'react-dom';"}
    )

    result, _ = run_linter_on_tree(tmp_path, make_config())

    assert [str(p.identity) for p in result.packages] == ["@scope/old@0.9.0"]


def test_analyze_file_outcomes(tmp_path):
    """Test analyze_file records results, errors and skips."""
    table = RestrictionTable.from_config(make_config().restricted_imports)
    good = tmp_path / "node_modules" / "a" / "index.js"
    good.parent.mkdir(parents=True)
    good.write_text("import { render } from 'react-dom';")

    outcome = analyze_file(str(good), table, max_size_bytes=1024)
    assert outcome.result is not None
    assert outcome.result.violations[0].symbol == "render"

    missing = analyze_file(str(tmp_path / "nope.js"), table, max_size_bytes=1024)
    assert missing.error is not None
    assert missing.error.kind == "read"

    skipped = analyze_file(str(good), table, max_size_bytes=1)
    assert skipped.skipped is True


def test_fail_fast_stops_queued_files(tmp_path, monkeypatch):
    """Test fail_fast drops files still waiting for a worker."""
    files = {"000-broken.js": "const = ;"}
    files.update({f"{i:03d}.js": "export const x = 1;" for i in range(1, 201)})
    package_dir = write_package(tmp_path, "many", "1.0.0", files)
    paths = [str(package_dir / name) for name in sorted(files)]
    analyzed = []

    def slow_analyze_source(source, file_path, restrictions):
        analyzed.append(file_path)
        if not file_path.endswith("broken.js"):
            time.sleep(0.01)
        return analyze_source(source, file_path, restrictions)

    monkeypatch.setattr("compat_lint.orchestrator.analyze_source", slow_analyze_source)

    with pytest.raises(MalformedSyntaxError):
        run_linter(paths, make_config(fail_fast=True, max_workers=2))

    assert paths[0] in analyzed
    assert len(analyzed) < 20


def test_unattributed_violations_fail_the_run(tmp_path):
    """Test a violating file whose package.json has no version is counted as failed."""
    package_dir = tmp_path / "node_modules" / "legacy-ui"
    package_dir.mkdir(parents=True)
    (package_dir / "package.json").write_text('{"name": "legacy-ui"}')
    (package_dir / "index.js").write_text("import { findDOMNode } from 'react-dom';")

    result, metrics = run_linter(
        [str(package_dir / "index.js")],
        make_config(),
        allow_list=["legacy-ui"],
        version_lookup=PackageVersionLookup(),
    )

    assert result.packages == []
    assert result.is_compliant is False
    assert [e.kind for e in result.errors] == ["manifest"]
    assert metrics.files_failed == 1
