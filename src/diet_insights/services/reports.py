"""Report service recomputing every view for a filter state."""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass

from diet_insights.domain.filters import FilterState
from diet_insights.domain.reports import DietReport
from diet_insights.domain.rows import ParsedDietLog
from diet_insights.services.aggregation import (
    process_choice_ingredient_usage,
    process_combo_ingredient_usage,
    process_detailed_raw_material_totals,
    process_overall_ingredient_totals,
    process_recipe_data,
)
from diet_insights.services.duration import (
    TARGET_DURATIONS,
    DurationContext,
    resolve_target_duration,
)
from diet_insights.services.filters import (
    apply_global_filters,
    get_all_dynamic_filter_options,
    get_global_counts,
)

_logger = logging.getLogger(__name__)


@dataclass
class DietReportService:
    """Service building all diet report views from a parsed diet log."""

    allowed_target_durations: tuple[int, ...] = TARGET_DURATIONS
    default_target_duration: int = 1
    debug: bool = False

    def build_report(
        self,
        log: ParsedDietLog,
        filters: FilterState,
        target_duration: int | None = None,
    ) -> DietReport:
        """Filter the log once and run every aggregation pipeline over it."""
        resolved_target = target_duration or self.default_target_for(log)
        duration = DurationContext.create(
            log.detected_input_duration,
            resolved_target,
            allowed_targets=self.allowed_target_durations,
        )
        started = time.perf_counter()
        original = log.original_rows
        filtered = apply_global_filters(original, filters)
        counts = get_global_counts(filtered)
        actual = duration.actual_input_duration
        target = duration.target_output_duration

        report = DietReport(
            filters=filters,
            actual_input_duration=actual,
            target_output_duration=target,
            counts=counts,
            filtered_row_count=len(filtered),
            ingredient_totals=process_overall_ingredient_totals(
                original, filtered, counts, actual, target
            ),
            raw_materials=process_detailed_raw_material_totals(
                filtered, counts, actual
            ),
            recipes=process_recipe_data(original, filtered, counts, actual, target),
            combos=process_combo_ingredient_usage(
                original, filtered, counts, actual, target
            ),
            choices=process_choice_ingredient_usage(
                original, filtered, counts, actual, target
            ),
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        _logger.info(
            "Built diet report: rows=%s filtered=%s target_days=%s in %.1fms",
            len(original),
            len(filtered),
            target,
            elapsed_ms,
        )
        if self.debug:
            _logger.info("Diet report filters: %s", filters)
        return report

    def filter_options(
        self, log: ParsedDietLog, filters: FilterState
    ) -> dict[str, list[str]]:
        """Return the values still selectable for each filter field."""
        return get_all_dynamic_filter_options(log.rows, filters)

    def default_target_for(self, log: ParsedDietLog) -> int:
        """Return the target duration to show for a freshly loaded log."""
        return resolve_target_duration(
            log.detected_input_duration,
            self.default_target_duration,
            allowed_targets=self.allowed_target_durations,
        )

    def target_durations(self) -> Iterable[int]:
        """Return the selectable target durations."""
        return self.allowed_target_durations
