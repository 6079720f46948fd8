"""Core data models shared by the parser, graph builder, and impact analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Mapping, Optional


class ImportType(str, Enum):
    NAMED = "named"
    DEFAULT = "default"
    NAMESPACE = "namespace"
    SIDE_EFFECT = "side-effect"


class ExportKind(str, Enum):
    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE = "type"
    CONST = "const"
    DEFAULT = "default"


class ChangeType(str, Enum):
    REMOVED = "removed"
    SIGNATURE_CHANGED = "signature-changed"


class ImpactLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ImportReference:
    source: str
    specifiers: List[str]
    import_type: ImportType
    line: int


@dataclass
class ExportReference:
    name: str
    kind: ExportKind
    line: int
    is_re_export: bool = False
    original_source: Optional[str] = None


@dataclass
class DependencyNode:
    file: str
    imports: List[ImportReference] = field(default_factory=list)
    exports: List[ExportReference] = field(default_factory=list)


@dataclass(frozen=True)
class DependencyGraph:
    """Immutable snapshot of the project's import graph.

    ``dependents`` is the reverse index: for each resolved import target, the
    set of files importing it. A new snapshot replaces the old one on every
    rebuild; neither mapping is mutated after publication.
    """

    nodes: Mapping[str, DependencyNode]
    dependents: Mapping[str, FrozenSet[str]]
    last_built: datetime
    file_count: int


@dataclass
class GraphStats:
    file_count: int = 0
    total_imports: int = 0
    total_exports: int = 0
    last_built: Optional[datetime] = None


@dataclass
class BreakingChange:
    file: str
    symbol: str
    change_type: ChangeType
    affected_files: List[str]
    suggestion: str = ""


@dataclass
class ImpactAnalysisOptions:
    include_tests: bool = True
    max_depth: int = 10
    exclude_patterns: List[str] = field(default_factory=list)


@dataclass
class ImpactDetail:
    file: str
    reason: str
    imported_symbols: List[str]
    usage_count: int
    severity: str = "warning"


@dataclass
class ChangeImpactResult:
    target_files: List[str]
    affected_files: List[str]
    impact_level: ImpactLevel
    details: List[ImpactDetail] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    breaking_changes: List[BreakingChange] = field(default_factory=list)
