"""HR Lifecycle package.

Feature modules (attendance, leaves, summaries) sit on top of shared core,
common and database layers. Flask controllers are kept thin; business rules
live in the services and atomicity lives in the repositories.
"""
