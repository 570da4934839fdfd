"""Configuration, database, errors and observability."""
