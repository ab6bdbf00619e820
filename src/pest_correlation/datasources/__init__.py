"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants
    └── {feature}.py      # Fetch + parse functions (one per endpoint/concept)

Fetch functions use the shared retrying session from ``services.http`` and
return raw payloads; parse functions turn payloads into ``schemas`` models.
Storing the result is the caller's job (see ``services/weather.py``).
"""
