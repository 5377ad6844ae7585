"""Unit tests for block extraction (extraction.py).

Tests cover:
- Signatures and qualified keys for functions, methods and classes
- Nesting rules (classes open a scope, functions do not)
- Last-write-wins on duplicate keys
- Byte ranges and containment
- Anonymous fallbacks via hand-built trees
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from smartdiff.blocks import BlockExtractor, BlockKind, BlockMap, extract_blocks
from smartdiff.blocks.extraction import blocks_from_tree, iter_blocks

# ============================================================================
# Fixtures
# ============================================================================

NESTED_SOURCE = """\
import os


class Outer(Base, metaclass=Meta):
    \"\"\"Docs.\"\"\"

    def run(self, x: int = 1) -> int:
        def helper():
            return x

        return helper()

    class Inner:
        def deep(self):
            pass


@decorator
def top_level(a, *args, **kwargs):
    return os.getcwd()


async def fetch():
    return None
"""


@dataclass
class FakeNode:
    """Hand-built stand-in for a tree-sitter node."""

    type: str
    start_byte: int
    end_byte: int
    named_children: Sequence[FakeNode] = ()
    fields: dict[str, FakeNode] = field(default_factory=dict)

    def child_by_field_name(self, name: str, /) -> FakeNode | None:
        return self.fields.get(name)


class FakeProducer:
    def __init__(self, root: FakeNode) -> None:
        self.root = root
        self.calls: list[bytes] = []

    def parse(self, source: bytes) -> FakeNode:
        self.calls.append(source)
        return self.root


@pytest.fixture
def nested_blocks() -> BlockMap:
    return extract_blocks(NESTED_SOURCE)


# ============================================================================
# Tests: Keys and signatures
# ============================================================================


class TestKeys:
    """Qualified keys follow enclosing class names."""

    def test_extracts_expected_keys(self, nested_blocks: BlockMap) -> None:
        assert set(nested_blocks) == {
            "class Outer(Base, metaclass=Meta)",
            "Outer.def run(self, x: int = 1)",
            "Outer.def helper()",
            "Outer.class Inner",
            "Outer.Inner.def deep(self)",
            "def top_level(a, *args, **kwargs)",
            "def fetch()",
        }

    def test_class_signature_keeps_superclasses_verbatim(self) -> None:
        blocks = extract_blocks("class A(B,  C):\n    pass\n")
        [block] = blocks.values()
        assert block.signature == "class A(B,  C)"
        assert block.name == "A"
        assert block.kind is BlockKind.CLASS

    def test_class_without_superclasses(self) -> None:
        blocks = extract_blocks("class A:\n    pass\n")
        assert list(blocks) == ["class A"]

    def test_function_signature_includes_parameters(self) -> None:
        blocks = extract_blocks("def foo(a, b=2):\n    pass\n")
        block = blocks["def foo(a, b=2)"]
        assert block.name == "foo"
        assert block.signature == "def foo(a, b=2)"
        assert block.kind is BlockKind.FUNCTION

    def test_nested_function_not_qualified_by_function(
        self, nested_blocks: BlockMap
    ) -> None:
        assert "Outer.def helper()" in nested_blocks
        assert "Outer.run.def helper()" not in nested_blocks

    def test_scope_restored_after_class(self, nested_blocks: BlockMap) -> None:
        assert "def top_level(a, *args, **kwargs)" in nested_blocks
        assert "Outer.def top_level(a, *args, **kwargs)" not in nested_blocks

    def test_decorated_function_code_starts_at_def(self) -> None:
        blocks = extract_blocks("@cache\ndef f():\n    return 1\n")
        assert blocks["def f()"].code.rstrip() == "def f():\n    return 1"


# ============================================================================
# Tests: Code slices and ranges
# ============================================================================


class TestCodeAndRanges:
    """Code is the exact source slice of the node."""

    def test_class_code_includes_members(self, nested_blocks: BlockMap) -> None:
        outer = nested_blocks["class Outer(Base, metaclass=Meta)"]
        assert outer.code.startswith("class Outer(Base, metaclass=Meta):")
        assert "def deep(self):" in outer.code

    def test_code_matches_offsets(self, nested_blocks: BlockMap) -> None:
        data = NESTED_SOURCE.encode()
        for block in nested_blocks.values():
            assert data[block.start_index : block.end_index].decode() == block.code

    def test_ranges_within_source(self, nested_blocks: BlockMap) -> None:
        length = len(NESTED_SOURCE.encode())
        for block in nested_blocks.values():
            assert 0 <= block.start_index < block.end_index <= length

    def test_class_range_contains_nested_blocks(self, nested_blocks: BlockMap) -> None:
        outer = nested_blocks["class Outer(Base, metaclass=Meta)"]
        for key, block in nested_blocks.items():
            if key.startswith("Outer."):
                assert outer.start_index <= block.start_index
                assert block.end_index <= outer.end_index

    def test_offsets_are_bytes_for_non_ascii_source(self) -> None:
        source = 'GREETING = "héllo"\n\ndef f():\n    return "ü"\n'
        block = extract_blocks(source)["def f()"]
        assert block.code.rstrip() == 'def f():\n    return "ü"'
        assert source.encode()[block.start_index : block.end_index].decode() == block.code


# ============================================================================
# Tests: Map semantics
# ============================================================================


class TestMapSemantics:
    """BlockMap construction rules."""

    def test_duplicate_key_last_wins(self) -> None:
        source = "def f():\n    return 1\n\ndef f():\n    return 2\n"
        blocks = extract_blocks(source)
        assert list(blocks) == ["def f()"]
        assert blocks["def f()"].code.rstrip() == "def f():\n    return 2"

    def test_extract_is_idempotent(self) -> None:
        first = extract_blocks(NESTED_SOURCE)
        second = extract_blocks(NESTED_SOURCE)
        assert first.keys() == second.keys()
        assert {k: b.code for k, b in first.items()} == {k: b.code for k, b in second.items()}

    @pytest.mark.parametrize("source", ["", "\n", "x = 1\n", "# comment only\n"])
    def test_no_blocks(self, source: str) -> None:
        assert extract_blocks(source) == {}

    def test_syntax_errors_do_not_raise(self) -> None:
        blocks = extract_blocks("def ok():\n    pass\n\ndef broken(:\n")
        assert isinstance(blocks, dict)

    def test_extractor_reuses_producer(self) -> None:
        extractor = BlockExtractor()
        assert extractor.extract("def a():\n    pass\n").keys() == {"def a()"}
        assert extractor.extract("def b():\n    pass\n").keys() == {"def b()"}


# ============================================================================
# Tests: Hand-built trees
# ============================================================================


class TestHandBuiltTrees:
    """Extraction only relies on the SyntaxNode surface."""

    def test_anonymous_class_and_function(self) -> None:
        source = b"class :\n    def (x): pass\n"
        func = FakeNode(
            "function_definition",
            12,
            len(source) - 1,
            fields={"parameters": FakeNode("parameters", 16, 19)},
        )
        cls = FakeNode("class_definition", 0, len(source) - 1, named_children=[func])
        root = FakeNode("module", 0, len(source), named_children=[cls])

        blocks = blocks_from_tree(root, source)

        assert set(blocks) == {"class AnonymousClass", "AnonymousClass.def anonymous(x)"}

    def test_missing_parameters_fall_back_to_empty_list(self) -> None:
        source = b"def f: pass"
        name = FakeNode("identifier", 4, 5)
        func = FakeNode("function_definition", 0, len(source), fields={"name": name})
        root = FakeNode("module", 0, len(source), named_children=[func])

        assert list(blocks_from_tree(root, source)) == ["def f()"]

    def test_transparent_nodes_are_walked(self) -> None:
        source = b"if x:\n    def g(): pass\n"
        func = FakeNode(
            "function_definition",
            10,
            len(source) - 1,
            fields={
                "name": FakeNode("identifier", 14, 15),
                "parameters": FakeNode("parameters", 15, 17),
            },
        )
        block = FakeNode("block", 10, len(source) - 1, named_children=[func])
        if_stmt = FakeNode("if_statement", 0, len(source) - 1, named_children=[block])
        root = FakeNode("module", 0, len(source), named_children=[if_stmt])

        assert list(blocks_from_tree(root, source)) == ["def g()"]

    def test_iter_blocks_yields_preorder(self) -> None:
        source = b"class A:\n    def m(self): pass\n"
        method = FakeNode(
            "function_definition",
            13,
            len(source) - 1,
            fields={
                "name": FakeNode("identifier", 17, 18),
                "parameters": FakeNode("parameters", 18, 24),
            },
        )
        cls = FakeNode(
            "class_definition",
            0,
            len(source) - 1,
            named_children=[method],
            fields={"name": FakeNode("identifier", 6, 7)},
        )
        root = FakeNode("module", 0, len(source), named_children=[cls])

        keys = [block.key for block in iter_blocks(root, source)]

        assert keys == ["class A", "A.def m(self)"]

    def test_custom_producer_receives_utf8_bytes(self) -> None:
        producer = FakeProducer(FakeNode("module", 0, 0))
        extract_blocks("x = 'é'\n", producer)
        assert producer.calls == ["x = 'é'\n".encode()]
