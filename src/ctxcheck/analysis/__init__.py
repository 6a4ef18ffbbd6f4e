"""
Static Analysis Package.

This package contains visitors and utilities that inspect LibCST trees to
find calls to watched APIs and validate their key/value context.

Modules:
    - ``imports``: Resolving the local aliases of a watched package.
    - ``classifier``: Deciding whether a call targets the watched package.
    - ``context``: Extracting and validating the context arguments.
    - ``types``: Static type inference used to check context keys.
"""
