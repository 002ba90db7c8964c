"""Shared page layout for incrlab HTML export."""

from __future__ import annotations

from htpy import Element, Node, a, body, div, h1, h2, head, header, html, li, link, meta, nav, p, style, title, ul
from markupsafe import Markup

from ._css import CSS
from ._urls import url_for_index, url_for_lab


def base_page(
    *,
    page_title: str,
    sidebar: Node = None,
    content: Node,
    css_href: str | None = None,
    breadcrumbs: list[tuple[str, str]] | None = None,
) -> str:
    """Render a full HTML page as a string.

    Args:
        page_title: Title shown in the header and the browser tab.
        sidebar: Optional sidebar navigation element.
        content: The main content node.
        css_href: If provided, link to external CSS instead of inline styles.
        breadcrumbs: Optional list of (label, href) for breadcrumb navigation.

    Returns:
        Complete HTML document as a string.

    """
    page = html(lang="en")[
        _render_head(f"{page_title} - incrlab", css_href=css_href),
        body[
            _render_header(page_title),
            _render_breadcrumbs(breadcrumbs) if breadcrumbs else None,
            div(".container")[
                sidebar,
                content,
            ],
        ],
    ]
    return f"<!DOCTYPE html>\n{page}"


def site_nav(*, lab_names: list[str]) -> Element:
    """Render a navigation sidebar for the multi-page site."""
    return nav(".sidebar")[
        h2["Navigation"],
        ul[
            li[a(href=url_for_index())["Home"]],
            (li[a(href=url_for_lab(name))[name]] for name in lab_names),
        ],
    ]


def _render_head(page_title: str, *, css_href: str | None = None) -> Element:
    """Render HTML <head> with inline or external CSS."""
    css_node: Node = link(rel="stylesheet", href=css_href) if css_href else style[Markup(CSS)]  # noqa: S704

    return head[
        meta(charset="UTF-8"),
        meta(name="viewport", content="width=device-width, initial-scale=1.0"),
        title[page_title],
        css_node,
    ]


def _render_header(page_title: str) -> Element:
    return header[
        h1[page_title],
        p(".subtitle")["incrlab Lab Report"],
    ]


def _render_breadcrumbs(breadcrumbs: list[tuple[str, str]]) -> Element:
    items: list[Node] = []
    for i, (label, href) in enumerate(breadcrumbs):
        if i > 0:
            items.append(" / ")
        if i < len(breadcrumbs) - 1:
            items.append(a(href=href)[label])
        else:
            # Last item is current page, no link
            items.append(label)

    return nav(".breadcrumbs")[items]
