"""Tree-sitter parser for HCL (Terraform) module source."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
from tree_sitter import Language, Node, Parser, Tree
import tree_sitter_hcl as tshcl

from .errors import ParseError


@dataclass
class Block:
    """A top-level HCL block such as ``variable "region" { ... }``."""
    type: str
    labels: List[str] = field(default_factory=list)
    body: Optional[Node] = None  # None for an empty block: `locals {}`
    start_line: int = 0

    def attributes(self) -> Dict[str, Node]:
        """Map attribute name -> attribute node for the block's inline key/value pairs.

        Nested blocks are not included. A repeated attribute name keeps the
        last occurrence.
        """
        attributes = {}
        if self.body is None:
            return attributes
        for child in self.body.named_children:
            if child.type != 'attribute':
                continue
            name_node = child.named_children[0]
            attributes[node_text(name_node)] = child
        return attributes

    def attribute(self, name: str) -> Optional[Node]:
        return self.attributes().get(name)


def node_text(node: Node) -> str:
    return node.text.decode('utf-8', errors='ignore')


def string_lit_value(node: Node) -> str:
    """Inner text of a quoted label, without the surrounding quotes."""
    text = node_text(node)
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


class HCLParser:
    """HCL parser using the tree-sitter v0.22+ API."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Factory method for the HCL grammar.

        Returns:
            Configured Parser instance
        """
        lang = Language(tshcl.language())
        return Parser(lang)

    def parse_source(self, source_code: bytes) -> Tree:
        """Parse raw bytes into a tree-sitter Tree (errors are left in the tree)."""
        return self.parser.parse(source_code)

    def parse_blocks(self, source_code: bytes, path: str | Path = "<memory>") -> List[Block]:
        """Parse module source into its ordered top-level blocks.

        Args:
            source_code: Concatenated module source
            path: Module path, used only in error messages

        Returns:
            Blocks in source order

        Raises:
            ParseError: If the source contains any syntax error
        """
        tree = self.parse_source(source_code)
        root = tree.root_node

        if root.has_error:
            bad = _first_error(root) or root
            detail = "missing token" if bad.is_missing else "invalid HCL syntax"
            raise ParseError(path, bad.start_point[0] + 1, bad.start_point[1] + 1, detail)

        blocks = []
        for body in root.named_children:
            if body.type != 'body':
                continue
            for child in body.named_children:
                if child.type == 'block':
                    blocks.append(self._to_block(child))

        return blocks

    def _to_block(self, node: Node) -> Block:
        """Build a Block from a tree-sitter `block` node.

        Layout: identifier (string_lit | identifier)* block_start body? block_end
        """
        block_type = None
        labels = []
        body = None

        for child in node.named_children:
            if child.type == 'identifier' and block_type is None:
                block_type = node_text(child)
            elif child.type == 'string_lit':
                labels.append(string_lit_value(child))
            elif child.type == 'identifier':
                labels.append(node_text(child))
            elif child.type == 'body':
                body = child

        return Block(
            type=block_type or '',
            labels=labels,
            body=body,
            start_line=node.start_point[0] + 1,
        )


def _first_error(node: Node) -> Optional[Node]:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None
