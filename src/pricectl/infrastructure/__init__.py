"""Infrastructure layer — the Open Exchange Rates HTTP client and payload models."""
