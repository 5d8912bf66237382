"""Packaging metadata checked against what the forcegraph package imports."""

from __future__ import annotations

import ast
import re
import sys
from pathlib import Path
from typing import Dict, Set

import pytest
import tomllib

PROJECT_ROOT = Path(__file__).resolve().parents[2]
PACKAGE_ROOT = PROJECT_ROOT / "forcegraph"

# Import names whose distribution is published under a different name.
DISTRIBUTION_NAMES: Dict[str, str] = {"yaml": "PyYAML"}


@pytest.fixture(name="pyproject", scope="module")
def pyproject_fixture() -> dict:
    return tomllib.loads((PROJECT_ROOT / "pyproject.toml").read_text(encoding="utf-8"))


def _distribution(requirement: str) -> str:
    match = re.match(r"[A-Za-z0-9][A-Za-z0-9._-]*", requirement.strip())
    assert match is not None, requirement
    return match.group(0).lower()


def _third_party_imports() -> Set[str]:
    roots: Set[str] = set()
    for path in PACKAGE_ROOT.rglob("*.py"):
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for statement in ast.walk(tree):
            if isinstance(statement, ast.Import):
                roots.update(alias.name.split(".")[0] for alias in statement.names)
            elif isinstance(statement, ast.ImportFrom) and statement.level == 0 and statement.module:
                roots.add(statement.module.split(".")[0])
    return {
        root
        for root in roots
        if root != "forcegraph" and root not in sys.stdlib_module_names and root != "__future__"
    }


def test_declared_dependencies_match_package_imports(pyproject: dict) -> None:
    declared = {_distribution(requirement) for requirement in pyproject["project"]["dependencies"]}

    imported = {DISTRIBUTION_NAMES.get(root, root).lower() for root in _third_party_imports()}

    assert imported, "expected forcegraph to import its numeric and config stack"
    assert imported <= declared, sorted(imported - declared)
    assert declared <= imported, sorted(declared - imported)


def test_test_runner_stays_out_of_runtime_dependencies(pyproject: dict) -> None:
    runtime = {_distribution(requirement) for requirement in pyproject["project"]["dependencies"]}
    dev = {_distribution(requirement) for requirement in pyproject["project"]["optional-dependencies"]["dev"]}

    assert "pytest" in dev
    assert "pytest" not in runtime


@pytest.mark.parametrize(
    ("requirements_file", "extra"),
    [("base.txt", None), ("dev.txt", "dev")],
)
def test_requirements_files_pin_the_same_versions(pyproject: dict, requirements_file: str, extra) -> None:
    lines = (PROJECT_ROOT / "requirements" / requirements_file).read_text(encoding="utf-8").splitlines()
    pinned = {line.strip() for line in lines if line.strip() and not line.startswith(("#", "-r"))}

    if extra is None:
        expected = set(pyproject["project"]["dependencies"])
    else:
        expected = set(pyproject["project"]["optional-dependencies"][extra])
        assert "-r base.txt" in lines

    assert pinned == expected


def test_packaging_installs_only_the_library_package(pyproject: dict) -> None:
    assert pyproject["tool"]["setuptools"]["packages"]["find"]["include"] == ["forcegraph*"]
    assert pyproject["project"]["requires-python"] == ">=3.11"
