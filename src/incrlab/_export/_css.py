"""CSS styles for incrlab HTML export."""

CSS = """
:root {
    --bg-color: #f8f9fa;
    --text-color: #212529;
    --border-color: #dee2e6;
    --primary-color: #0d6efd;
    --success-color: #198754;
    --warning-color: #ffc107;
    --danger-color: #dc3545;
    --info-color: #0dcaf0;
    --sidebar-width: 250px;
}

* {
    box-sizing: border-box;
    margin: 0;
    padding: 0;
}

body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
    line-height: 1.6;
    color: var(--text-color);
    background-color: var(--bg-color);
}

header {
    background: linear-gradient(135deg, #11998e 0%, #38ef7d 100%);
    color: white;
    padding: 2rem;
    text-align: center;
}

header h1 {
    margin-bottom: 0.5rem;
}

header .subtitle {
    opacity: 0.9;
}

.breadcrumbs {
    padding: 0.5rem 2rem;
    background: white;
    border-bottom: 1px solid var(--border-color);
}

.container {
    display: flex;
    min-height: calc(100vh - 120px);
}

.sidebar {
    width: var(--sidebar-width);
    background: white;
    border-right: 1px solid var(--border-color);
    padding: 1.5rem;
    position: sticky;
    top: 0;
    height: fit-content;
    max-height: 100vh;
    overflow-y: auto;
}

.sidebar h2 {
    font-size: 1rem;
    text-transform: uppercase;
    color: #6c757d;
    margin-bottom: 1rem;
}

.sidebar ul {
    list-style: none;
}

.sidebar li {
    margin: 0.25rem 0;
}

.sidebar a {
    color: var(--text-color);
    text-decoration: none;
    display: block;
    padding: 0.25rem 0.5rem;
    border-radius: 4px;
}

.sidebar a:hover {
    background: var(--bg-color);
}

.content {
    flex: 1;
    padding: 2rem;
    max-width: calc(100% - var(--sidebar-width));
}

section {
    margin-bottom: 2rem;
}

h2 {
    border-bottom: 2px solid var(--primary-color);
    padding-bottom: 0.5rem;
    margin-bottom: 1.5rem;
}

h3 {
    display: inline;
    font-size: 1.25rem;
}

h4 {
    color: #6c757d;
    margin-bottom: 0.75rem;
}

details {
    background: white;
    border: 1px solid var(--border-color);
    border-radius: 8px;
    margin-bottom: 1rem;
}

details summary {
    padding: 1rem;
    cursor: pointer;
    background: #f8f9fa;
    border-radius: 8px 8px 0 0;
}

details[open] summary {
    border-bottom: 1px solid var(--border-color);
}

.sample-content {
    padding: 1rem;
}

table {
    width: 100%;
    border-collapse: collapse;
    margin-bottom: 0.5rem;
}

.data-table {
    background: white;
}

th, td {
    padding: 0.5rem;
    text-align: left;
    border-bottom: 1px solid var(--border-color);
}

th {
    background: #f1f3f4;
    font-weight: 600;
}

td.number {
    text-align: right;
    font-variant-numeric: tabular-nums;
}

code {
    background: #e9ecef;
    padding: 0.125rem 0.375rem;
    border-radius: 3px;
    font-size: 0.9em;
}

.status {
    display: inline-block;
    padding: 0.125rem 0.5rem;
    border-radius: 4px;
    font-weight: 500;
}

.status.pass {
    background: #d1e7dd;
    color: #0f5132;
}

.status.fail {
    background: #f8d7da;
    color: #842029;
}

.status.unchecked {
    background: #fff3cd;
    color: #664d03;
}

.summary-panel {
    display: flex;
    gap: 1.5rem;
    padding: 1rem;
    background: white;
    border: 1px solid var(--border-color);
    border-radius: 8px;
    margin-bottom: 1.5rem;
    flex-wrap: wrap;
}

.summary-panel span {
    font-weight: 500;
}

.error-note {
    padding: 0.75rem 1rem;
    background: #f8d7da;
    color: #842029;
    border-radius: 4px;
    margin-bottom: 1rem;
}

.trace, .alloc-tree, .force-tree {
    margin-left: 1rem;
    padding-left: 0.5rem;
    border-left: 2px solid var(--border-color);
    font-size: 0.9em;
}

.trace > .effect {
    display: inline-block;
    font-weight: 600;
    margin-right: 0.5rem;
}

.edge, .loc, .path {
    display: inline;
}

.name {
    display: inline;
    font-family: monospace;
}

.path > .name::after {
    content: "/";
    color: #6c757d;
}

.edge > .loc + .loc::before, .edge > .root + .loc::before {
    content: " \\2192 ";
    color: #6c757d;
}

.edge.dirty {
    color: var(--danger-color);
}

.trace.alloc-fresh { border-left-color: var(--success-color); }
.trace.alloc-exists { border-left-color: #6c757d; }
.trace.force-miss, .trace.clean-eval { border-left-color: var(--danger-color); }
.trace.force-hit, .trace.clean-edge { border-left-color: var(--info-color); }
.trace.dirty { border-left-color: var(--warning-color); }

.alloc-tree.cell, .force-tree.cell {
    color: #0f5132;
}

.alloc-tree.revisit, .force-tree.revisit, .alloc-tree.absent, .force-tree.absent {
    font-style: italic;
    color: #6c757d;
}

@media (max-width: 768px) {
    .container {
        flex-direction: column;
    }

    .sidebar {
        width: 100%;
        position: relative;
        border-right: none;
        border-bottom: 1px solid var(--border-color);
    }

    .content {
        max-width: 100%;
    }
}
"""
