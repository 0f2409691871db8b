"""Columnar container layer.

This module holds the immutable structure-of-arrays container, its
version metadata and derived-field cache, and the Proxy and View handles
that read from one container snapshot.
"""
