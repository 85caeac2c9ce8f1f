"""
Standalone HTML report: plotly figures and pandas tables rendered into a
single Jinja2 template.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import plotly.graph_objects as go
from jinja2 import Environment, select_autoescape
from plotly.offline import get_plotlyjs_version

logger = logging.getLogger(__name__)

TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
  <script src="https://cdn.plot.ly/plotly-{{ plotly_version }}.min.js"></script>
  <style>
    body { font-family: -apple-system, "Segoe UI", Roboto, sans-serif; margin: 2rem auto; max-width: 1200px; color: #222; }
    h1 { margin-bottom: 0.25rem; }
    .meta { opacity: 0.75; margin-bottom: 2rem; }
    table.report-table { border-collapse: collapse; margin: 0.5rem 0 2rem 0; font-size: 14px; }
    table.report-table th, table.report-table td { border-bottom: 1px solid #ddd; padding: 4px 10px; text-align: right; }
    table.report-table th { background: #f5f5f5; }
  </style>
</head>
<body>
  <h1>{{ title }}</h1>
  <div class="meta">
    {% for key, value in meta.items() %}<div><b>{{ key }}:</b> {{ value }}</div>{% endfor %}
  </div>
  {% for section in sections %}
  <section>
    <h2>{{ section.title }}</h2>
    {% for block in section.blocks %}{{ block | safe }}{% endfor %}
  </section>
  {% endfor %}
</body>
</html>
"""


@dataclass
class ReportSection:
    title: str
    blocks: List[str] = field(default_factory=list)

    def add_figure(self, fig: go.Figure) -> None:
        self.blocks.append(fig.to_html(full_html=False, include_plotlyjs=False))

    def add_table(self, df: pd.DataFrame) -> None:
        if df is None or df.empty:
            self.blocks.append("<p><i>No data.</i></p>")
            return
        self.blocks.append(
            df.to_html(index=False, na_rep="", float_format=lambda v: f"{v:,.2f}", classes="report-table", border=0)
        )


def render_document(title: str, meta: Dict[str, Any], sections: List[ReportSection]) -> str:
    env = Environment(autoescape=select_autoescape(default_for_string=True))
    template = env.from_string(TEMPLATE)
    return template.render(title=title, meta=meta, sections=sections, plotly_version=get_plotlyjs_version())


def write_document(path: str | Path, title: str, meta: Dict[str, Any], sections: List[ReportSection]) -> Path:
    path = Path(path)
    meta = {**meta, "Generated": datetime.now().strftime("%Y-%m-%d %H:%M")}
    html = render_document(title, meta, sections)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    logger.info(f"Report written to {path}")
    return path
