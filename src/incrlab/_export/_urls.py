"""URL resolution for multi-page static site export.

All URLs are root-relative (start with /).

Structure:
    /index.html
    /labs/{lab}/index.html
    /labs/{lab}/samples/{batch_index}.html
"""


def url_for_index() -> str:
    """URL for the landing page."""
    return "/index.html"


def url_for_lab(lab_name: str) -> str:
    """URL for a lab's page."""
    return f"/labs/{lab_name}/index.html"


def url_for_sample(lab_name: str, batch_index: int) -> str:
    """URL for the detail page of one sample."""
    return f"/labs/{lab_name}/samples/{batch_index}.html"
