"""Function and class block extraction.

Walks a syntax tree depth-first and records every ``class_definition`` and
``function_definition`` node as a Block. Keys are qualified by the names of
enclosing classes only; functions do not open a scope, so a helper nested
inside a method is keyed next to the method:

    class Outer:                  -> "class Outer"
        def run(self):            -> "Outer.def run(self)"
            def helper(): ...     -> "Outer.def helper()"

Every other node type is transparent. Two blocks with the same key in one
version cannot be told apart; the later one wins.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from smartdiff.blocks.models import Block, BlockKind, BlockMap
from smartdiff.blocks.parsing import PythonTreeProducer, SyntaxNode, SyntaxTreeProducer

log = structlog.get_logger(__name__)

ANONYMOUS_CLASS = "AnonymousClass"
ANONYMOUS_FUNCTION = "anonymous"


def _node_text(node: SyntaxNode, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _field_text(node: SyntaxNode, field: str, source: bytes) -> str:
    child = node.child_by_field_name(field)
    return _node_text(child, source) if child is not None else ""


def _qualify(scope: tuple[str, ...], signature: str) -> str:
    return ".".join((*scope, signature))


def _class_block(node: SyntaxNode, source: bytes, scope: tuple[str, ...]) -> Block:
    name = _field_text(node, "name", source) or ANONYMOUS_CLASS
    superclasses = _field_text(node, "superclasses", source)
    signature = f"class {name}{superclasses}"
    return Block(
        key=_qualify(scope, signature),
        name=name,
        signature=signature,
        kind=BlockKind.CLASS,
        code=_node_text(node, source),
        start_index=node.start_byte,
        end_index=node.end_byte,
    )


def _function_block(node: SyntaxNode, source: bytes, scope: tuple[str, ...]) -> Block:
    name = _field_text(node, "name", source) or ANONYMOUS_FUNCTION
    parameters = _field_text(node, "parameters", source) or "()"
    signature = f"def {name}{parameters}"
    return Block(
        key=_qualify(scope, signature),
        name=name,
        signature=signature,
        kind=BlockKind.FUNCTION,
        code=_node_text(node, source),
        start_index=node.start_byte,
        end_index=node.end_byte,
    )


def iter_blocks(
    node: SyntaxNode,
    source: bytes,
    scope: tuple[str, ...] = (),
) -> Iterator[Block]:
    """Yield blocks under ``node`` in pre-order.

    ``scope`` holds the names of the enclosing classes. It is never mutated;
    a class passes an extended copy to its children.
    """
    if node.type == "class_definition":
        block = _class_block(node, source, scope)
        yield block
        scope = (*scope, block.name)
    elif node.type == "function_definition":
        yield _function_block(node, source, scope)

    for child in node.named_children:
        yield from iter_blocks(child, source, scope)


def blocks_from_tree(root: SyntaxNode, source: bytes) -> BlockMap:
    """Build a BlockMap from an already-parsed tree.

    Later blocks overwrite earlier ones sharing a key.
    """
    return {block.key: block for block in iter_blocks(root, source)}


class BlockExtractor:
    """Extracts BlockMaps with a reusable tree producer.

    Usage::

        extractor = BlockExtractor()
        old_blocks = extractor.extract(old_text)
        new_blocks = extractor.extract(new_text)
    """

    def __init__(self, producer: SyntaxTreeProducer | None = None) -> None:
        self._producer = producer or PythonTreeProducer()

    def extract(self, source: str) -> BlockMap:
        data = source.encode("utf-8")
        blocks = blocks_from_tree(self._producer.parse(data), data)
        log.debug("blocks_extracted", count=len(blocks), source_bytes=len(data))
        return blocks


def extract_blocks(source: str, producer: SyntaxTreeProducer | None = None) -> BlockMap:
    """Extract function and class blocks from Python source text."""
    return BlockExtractor(producer).extract(source)
