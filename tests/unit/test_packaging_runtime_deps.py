"""Tests for parity between package imports and declared runtime dependencies."""

from __future__ import annotations

import ast
import re
import sys
import tomllib
from pathlib import Path

# Import names that differ from their distribution name on the index
IMPORT_TO_DISTRIBUTION = {
    "tomli_w": "tomli-w",
}


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _requirement_name(requirement: str) -> str:
    match = re.match(r"[A-Za-z0-9_.-]+", requirement)
    assert match is not None
    return match.group(0).lower().replace("_", "-")


def _imported_top_level_modules(package_dir: Path) -> set[str]:
    modules: set[str] = set()
    for path in package_dir.rglob("*.py"):
        tree = ast.parse(path.read_text(encoding="utf-8"))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                modules.update(alias.name.split(".")[0] for alias in node.names)
            elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
                modules.add(node.module.split(".")[0])
    return modules


def test_third_party_imports_are_declared() -> None:
    """Every non-stdlib import of the package should be a pyproject dependency."""
    repo_root = _repo_root()

    pyproject_data = tomllib.loads((repo_root / "pyproject.toml").read_text(encoding="utf-8"))
    dependency_names = {
        _requirement_name(requirement)
        for requirement in pyproject_data["project"]["dependencies"]
    }

    imported = _imported_top_level_modules(repo_root / "expense_search")
    third_party = {
        name
        for name in imported
        if name not in sys.stdlib_module_names and name != "expense_search"
    }

    for module_name in sorted(third_party):
        distribution = IMPORT_TO_DISTRIBUTION.get(module_name, module_name)
        assert distribution in dependency_names, (
            f"Module '{module_name}' is imported by expense_search but "
            f"'{distribution}' is missing from pyproject.toml dependencies."
        )


def test_declared_dependencies_are_used() -> None:
    repo_root = _repo_root()

    pyproject_data = tomllib.loads((repo_root / "pyproject.toml").read_text(encoding="utf-8"))
    imported = _imported_top_level_modules(repo_root / "expense_search")
    imported_distributions = {IMPORT_TO_DISTRIBUTION.get(name, name) for name in imported}

    for requirement in pyproject_data["project"]["dependencies"]:
        name = _requirement_name(requirement)
        assert name in imported_distributions, f"Dependency '{name}' is declared but never imported"
