"""Syntax-tree producer for Python sources.

The extractor only depends on the small ``SyntaxNode`` surface below, so any
tree producer exposing tree-sitter's node API can stand in for the default
one (tests use hand-built trees).

``tree_sitter.Language`` objects are immutable and cached per process.
``tree_sitter.Parser`` instances carry mutable state, so a fresh one is built
for every parse.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import cache
from typing import Protocol

import tree_sitter
import tree_sitter_python


class SyntaxNode(Protocol):
    """The subset of ``tree_sitter.Node`` the extractor reads."""

    @property
    def type(self) -> str: ...

    @property
    def named_children(self) -> Sequence[SyntaxNode]: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    def child_by_field_name(self, name: str, /) -> SyntaxNode | None: ...


class SyntaxTreeProducer(Protocol):
    """Anything that turns source bytes into a root node."""

    def parse(self, source: bytes) -> SyntaxNode: ...


@cache
def python_language() -> tree_sitter.Language:
    return tree_sitter.Language(tree_sitter_python.language())


class PythonTreeProducer:
    """Default producer backed by tree-sitter-python."""

    def parse(self, source: bytes) -> SyntaxNode:
        parser = tree_sitter.Parser(python_language())
        tree = parser.parse(source)
        return tree.root_node
