"""
Shared API layer: exception taxonomy, global exception handler, response
envelope and pagination.
"""
