"""
finderkit: finder declarations and signatures for entity types.

    from finderkit.finders import FinderOperations, ConventionFinderServices
    from finderkit.catalog import EntityCatalog
"""

__version__ = "0.1.0"
