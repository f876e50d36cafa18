"""Ports for the projects bounded context.

Protocols for the remote API adapter and the exceptions adapters raise.
"""
