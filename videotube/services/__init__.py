"""Domain services: view aggregation and the external content store."""
