from __future__ import annotations

import logging
from typing import List, Sequence

from ..domain.values import AggregatedGroup, AggregationType, Row
from .aggregate.grouping import group_and_aggregate


class AggregateService:
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def group(
        self,
        rows: Sequence[Row],
        category_column: str,
        value_column: str,
        aggregation: AggregationType | str,
    ) -> List[AggregatedGroup]:
        how = AggregationType(aggregation)
        self.logger.info(
            f"Aggregating {value_column} by {category_column} ({how.value})",
            extra={"rows": len(rows)},
        )
        groups = group_and_aggregate(rows, category_column, value_column, how)
        self.logger.info("Aggregated", extra={"groups": len(groups)})
        return groups
