"""EÜR report aggregation domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from euer.database.base import Database
from euer.domain.catalog import CatalogService
from euer.domain.entities import (
    Classification,
    ClassificationCandidate,
    EurReport,
    FlowType,
    ItemStatus,
    LineDefinition,
    LineKind,
    ListItem,
    RawEvent,
    ReportRow,
    ReportSummary,
    SourceType,
    TaxConfig,
    VatMode,
)
from euer.domain.pipeline import ClassificationPipeline, PipelineContext
from euer.utils.date_parser import tax_year_range
from euer.utils.money import round2, sum_rounded

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def to_net(
    amount_gross: Decimal,
    classification: Optional[Classification],
    tax_config: TaxConfig,
) -> Decimal:
    """Convert a gross amount to net.

    Gross stays unchanged under the small-business rule, for any VAT mode
    other than "default", and for a non-positive VAT rate.
    """
    if tax_config.small_business_rule:
        return round2(amount_gross)
    vat_mode = classification.vat_mode if classification is not None else VatMode.NONE
    if vat_mode != VatMode.DEFAULT:
        return round2(amount_gross)
    rate = Decimal(str(tax_config.default_vat_rate or 0))
    if rate <= 0:
        return round2(amount_gross)
    return round2(Decimal(amount_gross) / (1 + rate / 100))


def resolve_line_totals(
    lines: Sequence[LineDefinition], direct_totals: dict[str, Decimal]
) -> list[Decimal]:
    """Resolve the total of every line, including computed lines.

    Lines live in an indexed table and resolved totals are memoized by
    index, so children shared by several computed lines are summed once.
    The catalog is validated acyclic before it gets here.
    """
    index_by_id = {line.id: index for index, line in enumerate(lines)}
    resolved: list[Optional[Decimal]] = [None] * len(lines)

    def resolve(index: int) -> Decimal:
        cached = resolved[index]
        if cached is not None:
            return cached
        line = lines[index]
        if line.kind != LineKind.COMPUTED:
            value = direct_totals.get(line.id, ZERO)
        else:
            value = sum_rounded(
                resolve(index_by_id[child_id])
                for child_id in line.computed_from_ids
                if child_id in index_by_id
            )
        resolved[index] = value
        return value

    return [resolve(index) for index in range(len(lines))]


def _matches_status(item: ListItem, status: ItemStatus) -> bool:
    cls = item.classification
    if status == ItemStatus.UNCLASSIFIED:
        return cls is None or (not cls.eur_line_id and not cls.excluded)
    if status == ItemStatus.CLASSIFIED:
        return cls is not None and bool(cls.eur_line_id) and not cls.excluded
    if status == ItemStatus.EXCLUDED:
        return cls is not None and cls.excluded
    return True


def _matches_search(event: RawEvent, needle: str) -> bool:
    return (
        needle in event.counterparty.lower()
        or needle in event.purpose.lower()
        or needle in event.date.isoformat()
        or needle in str(event.amount_gross)
    )


class ReportService:
    """Service for listing classifiable items and aggregating the EÜR report."""

    def __init__(
        self,
        db: Database,
        catalog_service: Optional[CatalogService] = None,
        pipeline: Optional[ClassificationPipeline] = None,
    ):
        """Initialize report service.

        Args:
            db: Database instance
            catalog_service: Optional catalog service
            pipeline: Optional suggestion pipeline
        """
        self.db = db
        self.catalog_service = catalog_service or CatalogService()
        self.pipeline = pipeline or ClassificationPipeline(db, self.catalog_service)

    def _classification_map(self, tax_year: int) -> dict[str, Classification]:
        return {item.key: item for item in self.db.list_classifications(tax_year)}

    def list_items(
        self,
        tax_year: int,
        tax_config: TaxConfig,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        source_type: Optional[SourceType] = None,
        flow_type: Optional[FlowType] = None,
        account_id: Optional[str] = None,
        status: ItemStatus = ItemStatus.ALL,
        search: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None,
        context: Optional[PipelineContext] = None,
    ) -> list[ListItem]:
        """List raw events with classification state and a suggestion.

        Args:
            tax_year: Tax year whose classifications and catalog apply
            tax_config: VAT settings for the net amount
            start_date: Optional start, defaults to January 1st
            end_date: Optional end, defaults to December 31st
            source_type: Optional source filter
            flow_type: Optional income/expense filter
            account_id: Optional bank account filter
            status: Classification status filter
            search: Optional case-insensitive text filter
            offset: Number of matching items to skip
            limit: Maximum number of items to return
            context: Pipeline context to reuse; built once per call otherwise

        Returns:
            List of items, newest first
        """
        start, end = tax_year_range(tax_year, start_date, end_date)
        lines = self.catalog_service.load(tax_year)
        lines_by_id = {line.id: line for line in lines}
        classifications = self._classification_map(tax_year)

        events = self.db.list_raw_events(start, end)
        if source_type is not None:
            events = [e for e in events if e.source_type == SourceType(source_type)]
        if flow_type is not None:
            events = [e for e in events if e.flow_type == FlowType(flow_type)]
        if account_id:
            events = [e for e in events if e.account_id == account_id]

        items = []
        for event in events:
            cls = classifications.get(event.key)
            items.append(
                ListItem(
                    event=event,
                    amount_net=to_net(event.amount_gross, cls, tax_config),
                    classification=cls,
                    line=lines_by_id.get(cls.eur_line_id) if cls and cls.eur_line_id else None,
                )
            )

        status = ItemStatus(status)
        if status != ItemStatus.ALL:
            items = [item for item in items if _matches_status(item, status)]

        if search and search.strip():
            needle = search.strip().lower()
            items = [item for item in items if _matches_search(item.event, needle)]

        offset = max(0, offset)
        if limit is not None and limit > 0:
            items = items[offset:offset + limit]
        elif offset:
            items = items[offset:]

        if context is None:
            context = self.pipeline.build_context(tax_year, lines)

        enriched = []
        for item in items:
            event = item.event
            suggestion = self.pipeline.suggest(
                context,
                ClassificationCandidate(
                    flow_type=event.flow_type,
                    counterparty=event.counterparty,
                    purpose=event.purpose,
                ),
            )
            enriched.append(
                ListItem(
                    event=event,
                    amount_net=item.amount_net,
                    classification=item.classification,
                    line=item.line,
                    suggested_line_id=suggestion.line_id,
                    suggestion_reason=suggestion.reason,
                    suggestion_layer=suggestion.layer,
                )
            )
        return enriched

    def get_report(
        self,
        tax_year: int,
        tax_config: TaxConfig,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> EurReport:
        """Aggregate classified events into per-line totals.

        Excluded events are skipped. Unclassified events and events whose
        classification points at an unknown line, a computed line or a line
        of the wrong flow type are counted as unclassified; the latter three
        also produce a warning. The report is derived fresh on every call.

        Args:
            tax_year: Tax year of catalog and classifications
            tax_config: VAT settings for the net amount
            start_date: Optional start, defaults to January 1st
            end_date: Optional end, defaults to December 31st

        Returns:
            EurReport with rows in catalog order

        Raises:
            CatalogError: If the catalog for the year is invalid
        """
        start, end = tax_year_range(tax_year, start_date, end_date)
        lines = self.catalog_service.load(tax_year)
        lines_by_id = {line.id: line for line in lines}
        totals: dict[str, Decimal] = {line.id: ZERO for line in lines}
        classifications = self._classification_map(tax_year)
        warnings: list[str] = []
        unclassified_count = 0

        for event in self.db.list_raw_events(start, end):
            cls = classifications.get(event.key)
            if cls is not None and cls.excluded:
                continue
            if cls is None or not cls.eur_line_id:
                unclassified_count += 1
                continue

            line = lines_by_id.get(cls.eur_line_id)
            if line is None:
                warnings.append(f"Unknown EÜR line for {event.key}: {cls.eur_line_id}")
                unclassified_count += 1
                continue
            if line.kind == LineKind.COMPUTED:
                warnings.append(f"Computed line cannot be used for classification: {line.id}")
                unclassified_count += 1
                continue
            if line.kind.value != event.flow_type.value:
                warnings.append(
                    f"Flow mismatch for {event.key}: line {line.id} is {line.kind.value}"
                )
                unclassified_count += 1
                continue

            amount_net = to_net(event.amount_gross, cls, tax_config)
            totals[line.id] = round2(totals[line.id] + amount_net)

        resolved = resolve_line_totals(lines, totals)
        rows = tuple(
            ReportRow(
                line_id=line.id,
                kennziffer=line.kennziffer,
                label=line.label,
                kind=line.kind,
                exportable=line.exportable,
                total=round2(total),
                sort_order=line.sort_order,
            )
            for line, total in zip(lines, resolved)
        )

        income_total = sum_rounded(row.total for row in rows if row.kind == LineKind.INCOME)
        expense_total = sum_rounded(row.total for row in rows if row.kind == LineKind.EXPENSE)

        for warning in warnings:
            logger.warning(warning)

        return EurReport(
            tax_year=tax_year,
            start_date=start,
            end_date=end,
            rows=rows,
            summary=ReportSummary(
                income_total=income_total,
                expense_total=expense_total,
                surplus=round2(income_total - expense_total),
            ),
            unclassified_count=unclassified_count,
            warnings=tuple(warnings),
        )
