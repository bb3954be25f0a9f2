"""
Generic document persistence: a collection-scoped store and the repository
gateway every entity service goes through.
"""
