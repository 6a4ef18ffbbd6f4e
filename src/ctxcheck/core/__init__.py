"""
Core Package.

Runs the analysis passes over files and collects their diagnostics.

Modules:
    - ``diagnostics``: Diagnostic model and per-file reporter.
    - ``engine``: The per-file `analyze` function and source-level helpers.
    - ``render``: Source text rendering for messages.
    - ``runner``: File discovery, parsing and parallel execution.
"""
