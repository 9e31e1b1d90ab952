"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all Redis access for a specific domain entity.
Repositories read raw values from the store and return domain model objects.
"""
