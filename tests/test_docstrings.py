"""Docstring completeness checks for the lineup package."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import List, Set

import pytest
from numpydoc.docscrape import NumpyDocString

import lineup


def _walk_package(root: ModuleType) -> List[ModuleType]:
    modules: List[ModuleType] = [root]
    for info in pkgutil.walk_packages(root.__path__, prefix=f"{root.__name__}."):
        modules.append(importlib.import_module(info.name))
    return modules


def _own_callables(modules: List[ModuleType]) -> List[object]:
    found: List[object] = []
    seen: Set[int] = set()

    def keep(obj: object) -> None:
        if id(obj) not in seen:
            seen.add(id(obj))
            found.append(obj)

    for module in modules:
        for name, obj in inspect.getmembers(module):
            if name.startswith("__") or getattr(obj, "__module__", None) != module.__name__:
                continue
            if inspect.isfunction(obj):
                keep(obj)
            elif inspect.isclass(obj):
                keep(obj)
                for meth_name, meth in vars(obj).items():
                    if meth_name.startswith("__"):
                        continue
                    if isinstance(meth, (staticmethod, classmethod)):
                        meth = meth.__func__
                    if inspect.isfunction(meth):
                        keep(meth)
    return found


def _section(docstring: str | None, name: str) -> list:
    if not docstring:
        return []
    return NumpyDocString(docstring)[name]


def _returns_value(sig: inspect.Signature) -> bool:
    annotation = sig.return_annotation
    if annotation is inspect.Signature.empty or annotation in {None, type(None)}:
        return False
    if isinstance(annotation, str) and annotation.strip().lower() in {"none", "nonetype"}:
        return False
    return True


_MODULES = _walk_package(lineup)
_CALLABLES = _own_callables(_MODULES)


def _object_id(obj: object) -> str:
    return f"{getattr(obj, '__module__', '?')}.{getattr(obj, '__qualname__', repr(obj))}"


@pytest.mark.parametrize("module", [m for m in _MODULES if not hasattr(m, "__path__")], ids=lambda m: m.__name__)
def test_modules_have_docstrings(module: ModuleType) -> None:
    """Every plain module opens with a summary docstring."""
    assert inspect.getdoc(module), f"{module.__name__} has no module docstring"


@pytest.mark.parametrize("obj", _CALLABLES, ids=_object_id)
def test_parameters_are_documented(obj: object) -> None:
    """Every named parameter appears in the Parameters section."""
    signature = inspect.signature(obj)
    names = [
        p.name
        for p in signature.parameters.values()
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD) and p.name not in {"self", "cls"}
    ]
    if not names:
        pytest.skip("No parameters requiring documentation")

    documented = {entry.name for entry in _section(inspect.getdoc(obj), "Parameters")}
    missing = [name for name in names if name not in documented]
    assert not missing, f"{_object_id(obj)} does not document: {', '.join(missing)}"


@pytest.mark.parametrize("obj", _CALLABLES, ids=_object_id)
def test_returns_are_documented(obj: object) -> None:
    """Callables annotated with a non-None result carry a Returns section."""
    if inspect.isclass(obj) or not _returns_value(inspect.signature(obj)):
        pytest.skip("Return value does not require documentation")
    assert _section(inspect.getdoc(obj), "Returns"), f"{_object_id(obj)} is missing a Returns section"
