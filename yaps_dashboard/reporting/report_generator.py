#!/usr/bin/env python3
"""
Report Generator - HTML/JSON Reports with Charts
Generates visual reports from fetched Yaps records
"""

import io
import json
import logging
import os
from datetime import datetime
from typing import Optional, Sequence

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from jinja2 import Template

from yaps_dashboard.models import (
    LOOKBACK_WINDOWS,
    SERIES_COLORS,
    STAT_CARDS,
    YapsData,
    chart_rows,
    format_yaps,
)


CHART_KINDS = ("line", "bar")

REPORT_TEMPLATE = Template("""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Yaps Report - {{ title }}</title>
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
               margin: 0; padding: 20px; background-color: #0A0A0A; color: #fff; }
        .container { max-width: 1200px; margin: 0 auto; background: #1A1A1A; padding: 30px;
                     border-radius: 8px; border: 1px solid #333333; }
        h1 { color: #7CFFD3; border-bottom: 3px solid #7CFFD3; padding-bottom: 10px; }
        h2 { color: #7CFFD3; margin-top: 30px; }
        .timestamp { color: #9ca3af; font-size: 14px; }
        .metrics-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
                        gap: 16px; margin: 16px 0; }
        .metric-card { background: #0A0A0A; padding: 16px; border-radius: 6px; border: 1px solid #333333; }
        .metric-card h3 { margin: 0; color: #9ca3af; font-size: 14px; }
        .metric-value { font-size: 24px; font-weight: bold; margin: 8px 0 0 0; }
        .chart { margin: 20px 0; text-align: center; }
        .chart img { max-width: 100%; height: auto; border-radius: 6px; }
        table { width: 100%; border-collapse: collapse; margin: 20px 0; }
        th, td { padding: 12px; text-align: left; border-bottom: 1px solid #333333; }
    </style>
</head>
<body>
    <div class="container">
        <h1>Yaps Analytics Report</h1>
        <p class="timestamp">Generated: {{ generated_at }}</p>
        <h2>{{ title }}</h2>
        {% if user_ids %}<p class="timestamp">User IDs: {{ user_ids }}</p>{% endif %}

        {% for user in users %}
        <div class="metrics-grid">
            {% for card_title, value in user.cards %}
            <div class="metric-card">
                <h3>{{ card_title }}</h3>
                <p class="metric-value" style="color: {{ user.color }}">{{ value }}</p>
            </div>
            {% endfor %}
        </div>
        {% endfor %}

        <h2>Attention Metrics Over Time</h2>
        <table>
            <thead>
                <tr>
                    <th>Window</th>
                    {% for user in users %}<th>@{{ user.username }}</th>{% endfor %}
                </tr>
            </thead>
            <tbody>
                {% for label, values in rows %}
                <tr>
                    <td><strong>{{ label }}</strong></td>
                    {% for value in values %}<td>{{ value }}</td>{% endfor %}
                </tr>
                {% endfor %}
            </tbody>
        </table>

        {% for kind, chart_file in charts %}
        <div class="chart">
            <img src="charts/{{ chart_file }}" alt="{{ kind }} chart">
        </div>
        {% endfor %}
    </div>
</body>
</html>
""")


def _loaded(records: Sequence[Optional[YapsData]]):
    """(position, record) pairs for the slots that hold data."""
    return [(i, r) for i, r in enumerate(records) if r is not None]


class ReportGenerator:
    """Generate charts and HTML/JSON reports from Yaps records."""

    def __init__(self, output_dir: str = "reports"):
        """
        Initialize report generator.

        Args:
            output_dir: Directory to save reports
        """
        self.output_dir = output_dir
        self.logger = logging.getLogger("yaps.reporting")

    def render_chart(self, records: Sequence[Optional[YapsData]], kind: str = "line") -> bytes:
        """
        Render the lookback windows of every loaded record as a PNG.

        Args:
            records: Records by input position (None for empty slots)
            kind: 'line' or 'bar'

        Returns:
            PNG image bytes
        """
        if kind not in CHART_KINDS:
            raise ValueError(f"Unknown chart kind: {kind}")
        loaded = _loaded(records)
        if not loaded:
            raise ValueError("No records to chart")

        labels = [label for label, _ in LOOKBACK_WINDOWS]
        positions = list(range(len(labels)))
        width = 0.8 / len(loaded)

        fig, ax = plt.subplots(figsize=(12, 6))
        fig.patch.set_facecolor('#1A1A1A')
        ax.set_facecolor('#1A1A1A')

        for n, (i, record) in enumerate(loaded):
            values = [value for _, value in record.window_values()]
            color = SERIES_COLORS[i]
            name = f"@{record.username}"
            if kind == "line":
                ax.plot(positions, values, linewidth=2, color=color, marker='o', label=name)
            else:
                offsets = [p - 0.4 + width * (n + 0.5) for p in positions]
                ax.bar(offsets, values, width=width, color=color, label=name)

        ax.set_xticks(positions)
        ax.set_xticklabels(labels)
        ax.set_title("Attention Metrics Over Time", fontsize=14, fontweight='bold', color='#7CFFD3')
        ax.set_ylabel('Yaps', fontsize=12, color='#666666')
        ax.tick_params(colors='#666666')
        ax.grid(True, alpha=0.3, linestyle='--', color='#333333')
        ax.legend()

        fig.tight_layout()
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=100, facecolor=fig.get_facecolor())
        plt.close(fig)
        return buf.getvalue()

    def generate_chart(self, records: Sequence[Optional[YapsData]], kind: str = "line") -> str:
        """Write a chart to ``<output_dir>/charts/<kind>.png`` and return the path."""
        png = self.render_chart(records, kind)
        chart_dir = os.path.join(self.output_dir, "charts")
        os.makedirs(chart_dir, exist_ok=True)
        chart_path = os.path.join(chart_dir, f"{kind}.png")
        with open(chart_path, 'wb') as f:
            f.write(png)
        return chart_path

    def generate_html_report(
        self,
        records: Sequence[Optional[YapsData]],
        include_charts: bool = True
    ) -> str:
        """
        Generate HTML report.

        Args:
            records: Records by input position
            include_charts: Whether to include line and bar charts

        Returns:
            Path to generated HTML file
        """
        loaded = _loaded(records)
        if not loaded:
            raise ValueError("No records to report on")
        os.makedirs(self.output_dir, exist_ok=True)

        charts = []
        if include_charts:
            for kind in CHART_KINDS:
                charts.append((kind, os.path.basename(self.generate_chart(records, kind))))

        users = [
            {
                "username": record.username,
                "color": SERIES_COLORS[i],
                "cards": [(title, format_yaps(getattr(record, field))) for title, field in STAT_CARDS],
            }
            for i, record in loaded
        ]
        rows = [
            (label, [format_yaps(getattr(record, field)) for _, record in loaded])
            for label, field in LOOKBACK_WINDOWS
        ]

        html_content = REPORT_TEMPLATE.render(
            generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            title=" vs ".join(f"@{r.username}" for _, r in loaded),
            user_ids=", ".join(r.user_id for _, r in loaded if r.user_id),
            users=users,
            rows=rows,
            charts=charts,
        )

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = os.path.join(self.output_dir, f"report_{timestamp}.html")
        with open(report_path, 'w') as f:
            f.write(html_content)

        self.logger.info(f"HTML report written to {report_path}")
        return report_path

    def generate_json_report(self, records: Sequence[Optional[YapsData]]) -> str:
        """
        Generate JSON report.

        Args:
            records: Records by input position

        Returns:
            Path to generated JSON file
        """
        report_data = {
            'generated_at': datetime.now().isoformat(),
            'users': [record.to_dict() for _, record in _loaded(records)],
            'chart_data': chart_rows(records),
        }

        os.makedirs(self.output_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = os.path.join(self.output_dir, f"report_{timestamp}.json")
        with open(report_path, 'w') as f:
            json.dump(report_data, f, indent=2)

        self.logger.info(f"JSON report written to {report_path}")
        return report_path
