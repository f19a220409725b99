"""Symbol extraction from parsed HCL blocks."""
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Tuple
from tree_sitter import Node

from .parser import Block, node_text
from .reference_tracker import ReferenceCounter
from ..utils import logger

if TYPE_CHECKING:
    from .module_usage import ModuleUsage


# <path>?ref=v<semver>, pre-release suffixes allowed
MODULE_SOURCE_RE = re.compile(r'(.+)\?ref=v([0-9]+(\.[0-9]+)*(-.*)*)')

# Expression wrappers that carry a single child in the tree-sitter HCL grammar
_EXPRESSION_WRAPPERS = {'expression', 'expr_term', 'literal_value', 'template_expr'}
_QUOTED_NODES = {'string_lit', 'quoted_template'}
_QUOTE_DELIMITERS = {'quoted_template_start', 'quoted_template_end'}
_LITERAL_PARTS = {'template_literal', 'escape_sequence'}


@dataclass(frozen=True)
class ModuleSource:
    """Decomposed `source` attribute of a module block."""
    path: str = ""
    version: str = ""


def variable_pattern(name: str) -> str:
    # trailing \W keeps `var.region` from matching `var.region_id`
    return rf'var\.{re.escape(name)}\W'


def local_pattern(name: str) -> str:
    return rf'local\.{re.escape(name)}\W'


def module_pattern(name: str, strict: bool = False) -> str:
    """Reference pattern for a module call.

    The loose form has no trailing boundary, so `module.foo` also matches
    inside `module.foobar`. Strict mode adds the same boundary variables use.
    """
    pattern = rf'module\.{re.escape(name)}'
    if strict:
        pattern += r'\W'
    return pattern


def data_key(data_type: str, name: str) -> str:
    return f"data.{data_type}.{name}"


def data_pattern(key: str) -> str:
    return re.escape(key)


def split_module_source(source: str) -> Tuple[str, str]:
    """Split a module source string into (path, version).

    `git::https://example.com/mod.git?ref=v1.2.3` -> (`git::https://example.com/mod.git`, `1.2.3`).
    Anything not following the `?ref=v<version>` convention is returned whole
    with an empty version.
    """
    matched = MODULE_SOURCE_RE.search(source)
    if not matched:
        return source, ""
    return matched.group(1), matched.group(2)


def parse_module_source(attribute: Optional[Node]) -> Tuple[str, str]:
    """Decompose a module block's `source` attribute.

    Args:
        attribute: tree-sitter `attribute` node (or None when absent)

    Returns:
        (path, version). Both are empty unless the value is a single,
        non-empty quoted string literal.
    """
    if attribute is None:
        return "", ""

    parts = [c for c in attribute.named_children if c.type != 'comment']
    if len(parts) < 2:
        return "", ""

    literal = _quoted_literal(parts[1])
    if not literal:
        return "", ""
    return split_module_source(literal)


def _quoted_literal(expression: Node) -> Optional[str]:
    """Return the text of a plain quoted string, or None for anything else."""
    node = expression
    while node.type in _EXPRESSION_WRAPPERS and node.named_child_count == 1:
        node = node.named_children[0]

    if node.type not in _QUOTED_NODES:
        return None

    inner = []
    for child in node.named_children:
        if child.type in _QUOTE_DELIMITERS or child.type == 'comment':
            continue
        if child.type == 'template':
            inner.extend(child.named_children)
        else:
            inner.append(child)

    if not inner or any(part.type not in _LITERAL_PARTS for part in inner):
        return None

    return node_text(node)[1:-1]


class SymbolExtractor:
    """Classify blocks and count references to each declared symbol."""

    def __init__(self, strict_module_refs: bool = False):
        """Initialize extractor.

        Args:
            strict_module_refs: Require a non-word character after `module.<name>`
        """
        self.strict_module_refs = strict_module_refs

    def extract(self, blocks: Iterable[Block], counter: ReferenceCounter, usage: "ModuleUsage"):
        """Populate `usage` from `blocks`, counting against `counter`'s text.

        A symbol declared twice keeps the later count and is recorded in
        `usage.duplicates`.
        """
        for block in blocks:
            if block.type == 'data':
                self._extract_data(block, counter, usage)
            elif block.type == 'module':
                self._extract_module(block, counter, usage)
            elif block.type == 'variable':
                self._extract_variable(block, counter, usage)
            elif block.type == 'locals':
                self._extract_locals(block, counter, usage)

    def _extract_data(self, block: Block, counter: ReferenceCounter, usage: "ModuleUsage"):
        if not self._has_labels(block, 2):
            return
        key = data_key(block.labels[0], block.labels[1])
        self._store(usage.data_lookups, key, counter.count(data_pattern(key)), usage)

    def _extract_module(self, block: Block, counter: ReferenceCounter, usage: "ModuleUsage"):
        if not self._has_labels(block, 1):
            return
        name = block.labels[0]
        count = counter.count(module_pattern(name, self.strict_module_refs))
        self._store(usage.modules, name, count, usage, prefix="module.")

        path, version = parse_module_source(block.attribute('source'))
        usage.module_sources[name] = ModuleSource(path=path, version=version)

    def _extract_variable(self, block: Block, counter: ReferenceCounter, usage: "ModuleUsage"):
        if not self._has_labels(block, 1):
            return
        name = block.labels[0]
        self._store(usage.variables, name, counter.count(variable_pattern(name)), usage, prefix="var.")

    def _extract_locals(self, block: Block, counter: ReferenceCounter, usage: "ModuleUsage"):
        for name in block.attributes():
            self._store(usage.locals, name, counter.count(local_pattern(name)), usage, prefix="local.")

    def _has_labels(self, block: Block, expected: int) -> bool:
        if len(block.labels) < expected:
            logger.debug(
                f"Skipping {block.type} block at line {block.start_line}: "
                f"expected {expected} label(s), got {len(block.labels)}"
            )
            return False
        return True

    @staticmethod
    def _store(mapping, key: str, count: int, usage: "ModuleUsage", prefix: str = ""):
        if key in mapping:
            usage.duplicates.append(f"{prefix}{key}")
        mapping[key] = count
