"""Application layer for the projects bounded context.

Orchestrates grant diffing, settings reconciliation and the dependents
drain against the remote API port.
"""
