"""
Shared data-access building blocks.

`core/` holds the pieces every feature goes through: settings, the asyncpg
database handle, the SQL statement builders and row id generation. Keep
feature-specific SQL and business logic in the feature package (e.g.
`feedback/`).
"""
