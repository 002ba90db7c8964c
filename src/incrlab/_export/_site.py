"""Multi-page static site generation for a batch of labs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from htpy import a, h2, main, section, span, table, tbody, td, th, thead, tr

from ._components import validity_badge
from ._css import CSS
from ._layout import base_page, site_nav
from ._urls import url_for_index, url_for_lab, url_for_sample
from .html import render_lab_overview, render_sample_detail

if TYPE_CHECKING:
    from pathlib import Path

    from incrlab._lab import LabOutcome

logger = logging.getLogger(__name__)


def generate_site(outcomes: list[LabOutcome], output_dir: Path) -> None:
    """Generate a multi-page static site from lab outcomes.

    Creates a directory structure with:
    - index.html: Landing page listing every lab
    - styles.css: Shared CSS stylesheet
    - labs/{lab}/index.html: Lab overview with its samples table
    - labs/{lab}/samples/{step}.html: Full detail of one sample
    - .nojekyll: Marker file for GitHub Pages compatibility

    Args:
        outcomes: Outcomes of the labs that were run, in display order.
        output_dir: Directory to write the site into. Created if it doesn't exist.

    """
    output_dir.mkdir(parents=True, exist_ok=True)
    lab_names = [o.name for o in outcomes]
    sidebar = site_nav(lab_names=lab_names)

    _write_file(output_dir / "styles.css", CSS)
    _write_file(output_dir / ".nojekyll", "")
    _write_file(output_dir / "index.html", _render_index_page(outcomes, lab_names))

    for outcome in outcomes:
        lab_dir = output_dir / "labs" / outcome.name
        _write_file(
            lab_dir / "index.html",
            base_page(
                page_title=outcome.name,
                sidebar=sidebar,
                content=main(".content")[render_lab_overview(outcome)],
                css_href="/styles.css",
                breadcrumbs=[("Home", url_for_index()), (outcome.name, url_for_lab(outcome.name))],
            ),
        )
        if outcome.results is None:
            continue
        for sample in outcome.results.samples:
            _write_file(
                output_dir / url_for_sample(outcome.name, sample.batch_index).lstrip("/"),
                base_page(
                    page_title=f"{outcome.name} step {sample.batch_index}",
                    sidebar=sidebar,
                    content=main(".content")[render_sample_detail(outcome.name, sample)],
                    css_href="/styles.css",
                    breadcrumbs=[
                        ("Home", url_for_index()),
                        (outcome.name, url_for_lab(outcome.name)),
                        (f"Step {sample.batch_index}", url_for_sample(outcome.name, sample.batch_index)),
                    ],
                ),
            )
    logger.debug("Wrote site for %d labs to %s", len(outcomes), output_dir)


def _render_index_page(outcomes: list[LabOutcome], lab_names: list[str]) -> str:
    rows = []
    for outcome in outcomes:
        if outcome.results is None:
            status = span(".status.fail")[outcome.error or "failed"]
            n_samples = "-"
        else:
            status = validity_badge(outcome.results.all_valid)
            n_samples = str(len(outcome.results))
        rows.append(tr[td[a(href=url_for_lab(outcome.name))[outcome.name]], td[n_samples], td[status]])

    return base_page(
        page_title="Labs",
        sidebar=site_nav(lab_names=lab_names),
        content=main(".content")[
            section[
                h2["Labs"],
                table(".data-table")[
                    thead[tr[th["Lab"], th["Samples"], th["Outputs"]]],
                    tbody[rows],
                ],
            ],
        ],
        css_href="/styles.css",
    )


def _write_file(path: Path, content: str) -> None:
    """Write content to a file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
