"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB wiring,
environment configuration, error mapping, logging). Feature-specific SQL and
business logic live in the feature package (e.g. `users/`).
"""
