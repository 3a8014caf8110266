"""Time-series containers, ingestion and toy-data simulation."""
