"""Content relevance HTTP service: stores, async recommendation service, FastAPI app."""
