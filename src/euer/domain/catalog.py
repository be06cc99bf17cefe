"""EÜR line catalog loading and structural validation."""

import logging
from typing import Iterable, Optional, Sequence

from euer.domain.catalog_data import CATALOG_SOURCES
from euer.domain.entities import LineDefinition, LineKind
from euer.domain.errors import (
    CatalogError,
    computed_cycle,
    duplicate_kennziffer,
    duplicate_line_id,
    missing_computed_child,
)

logger = logging.getLogger(__name__)


def line_id_for(tax_year: int, code: str) -> str:
    """Return the line id for a Kennziffer or an explicit id."""
    if code.startswith(f"E{tax_year}_"):
        return code
    return f"E{tax_year}_KZ{code}"


def build_lines(tax_year: int, source_version: str, definitions: Iterable[tuple]) -> list[LineDefinition]:
    """Build line definitions from the static definition tuples.

    The position in the definition source becomes the sort order. Repeated
    children of a computed line are kept once, in first-seen order.
    """
    lines = []
    for index, (code, label, kind, exportable, children) in enumerate(definitions):
        line_id = line_id_for(tax_year, code)
        kennziffer = None if line_id == code else code
        child_ids = tuple(dict.fromkeys(line_id_for(tax_year, child) for child in children))
        lines.append(
            LineDefinition(
                id=line_id,
                tax_year=tax_year,
                kennziffer=kennziffer,
                label=label,
                kind=LineKind(kind),
                exportable=exportable,
                sort_order=index,
                computed_from_ids=child_ids,
                source_version=source_version,
            )
        )
    return lines


def validate_catalog(lines: Sequence[LineDefinition]) -> None:
    """Validate the structure of a line catalog.

    Raises:
        CatalogError: On duplicate ids, duplicate non-empty Kennziffer within
            a year, computed lines referencing unknown ids, or a cycle among
            computed lines.
    """
    ids: set[str] = set()
    kennziffern: set[tuple[int, str]] = set()

    for line in lines:
        if line.id in ids:
            raise CatalogError(duplicate_line_id(line.id))
        ids.add(line.id)

        kz = (line.kennziffer or "").strip()
        if kz:
            key = (line.tax_year, kz)
            if key in kennziffern:
                raise CatalogError(duplicate_kennziffer(line.tax_year, kz))
            kennziffern.add(key)

    for line in lines:
        if line.kind != LineKind.COMPUTED:
            continue
        for child_id in line.computed_from_ids:
            if child_id not in ids:
                raise CatalogError(missing_computed_child(line.id, child_id))

    cycle_node = find_cycle({line.id: line for line in lines})
    if cycle_node is not None:
        raise CatalogError(computed_cycle(cycle_node))


def find_cycle(lines_by_id: dict[str, LineDefinition]) -> Optional[str]:
    """Return a line id on a computed-line cycle, or None if acyclic.

    Iterative depth-first traversal. ``visiting`` holds the ids on the
    current path, ``visited`` the ids whose subtree is fully explored;
    reaching a node that is still on the path closes a cycle.
    """

    def children(line_id: str) -> Iterable[str]:
        line = lines_by_id.get(line_id)
        if line is None or line.kind != LineKind.COMPUTED:
            return iter(())
        return iter(line.computed_from_ids)

    visited: set[str] = set()

    for root in lines_by_id:
        if root in visited:
            continue
        visiting = {root}
        stack = [(root, children(root))]
        while stack:
            node, pending = stack[-1]
            child = next(pending, None)
            if child is None:
                stack.pop()
                visiting.discard(node)
                visited.add(node)
                continue
            if child in visited:
                continue
            if child in visiting:
                return child
            visiting.add(child)
            stack.append((child, children(child)))

    return None


class CatalogService:
    """Service for loading validated per-year line catalogs."""

    def __init__(self, sources: Optional[dict[int, tuple[str, list[tuple]]]] = None):
        """Initialize catalog service.

        Args:
            sources: Optional mapping of tax year to (source_version,
                definitions). Defaults to the shipped schedules.
        """
        self.sources = CATALOG_SOURCES if sources is None else sources

    def available_years(self) -> list[int]:
        """List tax years with a shipped schedule."""
        return sorted(self.sources)

    def load(self, tax_year: int) -> list[LineDefinition]:
        """Load and validate the catalog for a tax year.

        Validation runs on every load. Years without a schedule yield an
        empty catalog.

        Raises:
            CatalogError: If the schedule is structurally invalid
        """
        source = self.sources.get(tax_year)
        if source is None:
            logger.info("No EÜR catalog defined for tax year %s", tax_year)
            return []

        source_version, definitions = source
        lines = build_lines(tax_year, source_version, definitions)
        validate_catalog(lines)
        logger.info(
            "Loaded %d EÜR lines for %s (source %s)", len(lines), tax_year, source_version
        )
        return lines

    def get_line_map(self, tax_year: int) -> dict[str, LineDefinition]:
        """Load the catalog for a year keyed by line id."""
        return {line.id: line for line in self.load(tax_year)}
