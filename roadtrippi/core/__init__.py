"""
Core infrastructure: database session, identity resolution, errors, logging, metrics.
"""
