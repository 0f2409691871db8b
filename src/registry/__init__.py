"""Field registry layer.

This module owns field metadata: validators, derived-field dependencies,
and computation functions shared by every container.
"""
