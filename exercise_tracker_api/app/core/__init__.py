"""
Shared building blocks: configuration, logging, errors, dates and the store.
"""
