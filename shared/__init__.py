"""
Shared Kernel

This module contains value objects, base domain errors and API plumbing
shared across all domain apps.
"""
