"""Settings, retrieval views and runners built on the ingestion core."""
