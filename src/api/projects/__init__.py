"""Projects bounded context.

Converges a cloud database-platform project (teams, API keys and
feature-flag settings) against a declared configuration, and waits for
dependent clusters to drain before deleting it.
"""
