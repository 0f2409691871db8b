"""Interchange layer for containers.

This package converts container snapshots into record payloads, JSON,
and Arrow tables, and rebuilds containers from them.
"""
