"""Multi-tenant, retrieval-grounded chat backend with pluggable LLM providers."""
