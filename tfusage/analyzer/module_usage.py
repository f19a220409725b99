"""Per-module usage report: how often each declared symbol is referenced."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .discovery import load_module
from .extractor import ModuleSource, SymbolExtractor
from .parser import HCLParser
from .reference_tracker import ReferenceCounter


@dataclass
class ModuleUsage:
    """Reference counts for every symbol declared in one module directory.

    A count of zero means the symbol is declared but never referenced
    anywhere in the module's text.
    """
    path: str
    variables: Dict[str, int] = field(default_factory=dict)
    locals: Dict[str, int] = field(default_factory=dict)
    modules: Dict[str, int] = field(default_factory=dict)
    data_lookups: Dict[str, int] = field(default_factory=dict)  # keyed data.<type>.<name>
    module_sources: Dict[str, ModuleSource] = field(default_factory=dict)
    duplicates: List[str] = field(default_factory=list)

    @classmethod
    def from_path(cls, path: str | Path, strict_module_refs: bool = False,
                  extension: str = ".tf") -> "ModuleUsage":
        """Load, parse and count one module directory.

        Args:
            path: Module directory
            strict_module_refs: Require a boundary after `module.<name>`
            extension: Configuration file extension

        Returns:
            Fully populated ModuleUsage

        Raises:
            LoadError: If the directory or a file cannot be read
            ParseError: If the concatenated source is not valid HCL
        """
        source = load_module(path, extension)
        return cls.from_source(source, path=path, strict_module_refs=strict_module_refs)

    @classmethod
    def from_source(cls, source: bytes | str, path: str | Path = "<memory>",
                    strict_module_refs: bool = False) -> "ModuleUsage":
        """Build a report from already-loaded module source."""
        if isinstance(source, str):
            source = source.encode('utf-8')

        blocks = HCLParser().parse_blocks(source, path)
        counter = ReferenceCounter(source.decode('utf-8', errors='ignore'))

        usage = cls(path=str(path))
        SymbolExtractor(strict_module_refs=strict_module_refs).extract(blocks, counter, usage)
        return usage

    def unused_count(self) -> int:
        """Number of declared symbols (of any kind) with zero references."""
        return sum(
            1
            for mapping in (self.variables, self.locals, self.modules, self.data_lookups)
            for count in mapping.values()
            if count == 0
        )
