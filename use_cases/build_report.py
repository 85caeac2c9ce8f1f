from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd

from core.config import ReportConfig
from domain.entities import Axis, Metric, TransformOptions
from infrastructure.analysis.spectral import dominant_periods
from infrastructure.report.figures import CHART_BUILDERS
from infrastructure.report.html_document import ReportSection, write_document
from infrastructure.report.views import axis_table, display_labels, latest_table, metric_series, summary_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportView:
    metric: Metric
    options: TransformOptions
    axis: Axis = Axis.DATE
    kind: str = "Line"  # one of CHART_BUILDERS, or "Latest" / "Axis table"


ROLLING = TransformOptions(rolling=True)
ROLLING_PER_POP = TransformOptions(per_population=True, rolling=True)

DEFAULT_VIEWS: Tuple[ReportView, ...] = (
    ReportView(Metric.DAILY_CONFIRMED, TransformOptions(), kind="Bar"),
    ReportView(Metric.DAILY_CONFIRMED, TransformOptions(), kind="Latest"),
    ReportView(Metric.DAILY_CONFIRMED, ROLLING_PER_POP, Axis.DAYS_SINCE_LOCKDOWN),
    ReportView(Metric.CONFIRMED, TransformOptions(per_population=True), Axis.DAYS_SINCE_LOCKDOWN, kind="Faceted line"),
    ReportView(Metric.DAILY_DEATHS, ROLLING, kind="Faceted line"),
    ReportView(Metric.DAILY_DEATHS, ROLLING_PER_POP, Axis.DAYS_SINCE_50_DEATHS),
    ReportView(Metric.DEATHS, TransformOptions(per_population=True), Axis.DAYS_SINCE_50_DEATHS, kind="Axis table"),
    ReportView(Metric.CONFIRMED, TransformOptions(rolling=True, percentage=True)),
    ReportView(Metric.ACTIVE, TransformOptions(per_population=True)),
)


def _view_section(frame: pd.DataFrame, view: ReportView, cfg: ReportConfig) -> ReportSection:
    label = view.options.describe(view.metric)

    if view.kind == "Latest":
        section = ReportSection(f"{label}: last {cfg.latest_days} days")
        table = latest_table(frame, view.metric, view.options, days=cfg.latest_days, cfg=cfg)
        section.add_table(display_labels(table, value_label=label))
        return section

    if view.kind == "Axis table":
        section = ReportSection(f"{label} by {view.axis.label.lower()}")
        section.add_table(display_labels(axis_table(frame, view.metric, view.options, view.axis, cfg)))
        return section

    title = label if view.axis is Axis.DATE else f"{label} by {view.axis.label.lower()}"
    section = ReportSection(title)
    series = metric_series(frame, view.metric, view.options, view.axis, cfg)
    if series.empty:
        section.add_table(series)
        return section
    section.add_figure(CHART_BUILDERS[view.kind](series, view.metric, view.options, view.axis))
    return section


def build_sections(
    frame: pd.DataFrame,
    cfg: ReportConfig,
    views: Tuple[ReportView, ...] = DEFAULT_VIEWS,
) -> List[ReportSection]:
    summary = ReportSection("Latest totals")
    summary.add_table(display_labels(summary_table(frame, cfg)))
    sections = [summary]

    for view in views:
        sections.append(_view_section(frame, view, cfg))

    cycles = ReportSection("Reporting cycle (dominant period of daily series)")
    for metric in (Metric.DAILY_CONFIRMED, Metric.DAILY_DEATHS):
        periods = dominant_periods(frame, metric, cfg).rename(columns={"period": metric.label})
        cycles.blocks.append(f"<h3>{metric.label}</h3>")
        cycles.add_table(display_labels(periods))
    sections.append(cycles)
    return sections


def build_report_uc(cfg: ReportConfig, frame: pd.DataFrame, meta: Dict[str, object]) -> Path:
    sections = build_sections(frame, cfg)
    doc_meta = {
        "Source": meta.get("source"),
        "Period": f"{meta.get('date_range_start')} to {meta.get('date_range_end')}",
        "Countries": ", ".join(meta.get("countries", [])),
    }
    logger.info(f"Rendering {len(sections)} report sections")
    return write_document(cfg.output_path, "COVID-19 by country", doc_meta, sections)
