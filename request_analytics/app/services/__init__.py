"""
Service layer.

Validation, the query engine, country resolution and the record
stores live here so that the API handlers stay thin.
"""
