"""
Application package initializer.

The package is organised into ``core`` (configuration, logging,
database and HTTP plumbing), ``schemas`` (Pydantic models),
``services`` (validation, querying, country resolution and the record
stores) and ``api`` (the routes).
"""
