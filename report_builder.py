# report_builder.py
"""
Report builder.
Renders the terminal views (activity chart, boxed messages) and the
optional HTML export through the Jinja2 template in templates/.
"""
import logging
import os
import re
from datetime import datetime
from typing import List, Optional

import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape

from commit_stats import group_hours
from config import GlobalConfig
from models import CommitStatistics, RepoInfo, WEEKDAY_LABELS

logger = logging.getLogger(__name__)

BAR_WIDTH = 20
BAR_CHAR = "█"
RULE_WIDTH = 80
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists", "nl2br"]


def header_banner(title: str) -> str:
    return "\n".join(["=" * RULE_WIDTH, title.center(RULE_WIDTH).rstrip(), "=" * RULE_WIDTH])


def render_bar(count: int, max_count: int, width: int = BAR_WIDTH) -> str:
    """Bar proportional to count/max_count; empty when max_count is 0."""
    if max_count <= 0:
        return ""
    return BAR_CHAR * int(round(count / max_count * width))


def render_activity_chart(stats: CommitStatistics) -> str:
    """
    Text chart of the commit activity: one bar per weekday, then the day
    split into 6-hour blocks.
    """
    lines: List[str] = ["📊 Commit activity by weekday:"]
    max_weekday = max(stats.weekday_counts) if stats.weekday_counts else 0
    for label, count in zip(WEEKDAY_LABELS, stats.weekday_counts):
        lines.append(f"  {label:<9} {render_bar(count, max_weekday)} {count}")

    lines.append("")
    lines.append("🕒 Commit activity by time of day:")
    blocks = group_hours(stats.hour_counts)
    max_block = max((count for _, count in blocks), default=0)
    for label, count in blocks:
        lines.append(f"  {label:<5} {render_bar(count, max_block)} {count}")

    lines.append("")
    lines.append(
        f"  Busiest day: {stats.busiest_weekday} | Busiest hour: {stats.busiest_hour}:00"
    )
    lines.append(
        f"  Message length: min {stats.message_length.min}, "
        f"max {stats.message_length.max}, avg {stats.message_length.avg}"
    )
    return "\n".join(lines)


def boxed(text: str) -> str:
    """Draw a single-line box around (possibly multi-line) text."""
    body = text.splitlines() or [""]
    width = max(len(line) for line in body)
    lines = ["┌" + "─" * (width + 2) + "┐"]
    for line in body:
        lines.append(f"│ {line.ljust(width)} │")
    lines.append("└" + "─" * (width + 2) + "┘")
    return "\n".join(lines)


def _shell_quote(text: str) -> str:
    for char in ("\\", '"', "$", "`"):
        text = text.replace(char, "\\" + char)
    return f'"{text}"'


def commit_command(message: str) -> str:
    """The `git commit` line for a suggested message, one -m per paragraph."""
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", message.strip()) if p.strip()]
    if not paragraphs:
        paragraphs = [""]
    return "git commit " + " ".join(f"-m {_shell_quote(p)}" for p in paragraphs)


def _get_css_styles(global_config: GlobalConfig) -> str:
    css_path = os.path.join(global_config.templates_dir, "styles.css")
    try:
        with open(css_path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        logger.warning(f"⚠️ Could not load the CSS file {css_path}: {e}")
        return ""


def generate_html_report(
    repo_info: RepoInfo,
    stats: CommitStatistics,
    analysis: Optional[str],
    global_config: GlobalConfig,
    days: Optional[int] = None,
) -> str:
    """Render the analysis report with the Jinja2 template."""
    env = Environment(
        loader=FileSystemLoader(global_config.templates_dir),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )

    analysis_html = ""
    if analysis:
        analysis_html = markdown.markdown(analysis, extensions=MARKDOWN_EXTENSIONS)

    max_weekday = max(stats.weekday_counts) if stats.weekday_counts else 0
    weekday_rows = [
        {
            "label": label,
            "count": count,
            "percent": (count * 100 // max_weekday) if max_weekday else 0,
        }
        for label, count in zip(WEEKDAY_LABELS, stats.weekday_counts)
    ]
    hour_blocks = group_hours(stats.hour_counts)
    max_block = max((count for _, count in hour_blocks), default=0)
    hour_rows = [
        {
            "label": label,
            "count": count,
            "percent": (count * 100 // max_block) if max_block else 0,
        }
        for label, count in hour_blocks
    ]

    template_context = {
        "title": f"GitWise report - {repo_info.name}",
        "generation_time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "css_content": _get_css_styles(global_config),
        "repo": repo_info,
        "days": days,
        "stats": stats,
        "weekday_rows": weekday_rows,
        "hour_rows": hour_rows,
        "analysis_html": analysis_html,
    }

    template_name = "report.html.j2"
    template = env.get_template(template_name)
    logger.debug(f"🎨 Rendering Jinja2 template: {template_name}")
    return template.render(**template_context)


def save_html_report(html_content: str, output_path: str) -> str:
    """Write the HTML report and return its absolute path."""
    full_path = os.path.abspath(output_path)
    parent = os.path.dirname(full_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(full_path, "w", encoding="utf-8") as f:
        f.write(html_content)
    logger.info(f"✅ HTML report saved: {full_path}")
    return full_path
