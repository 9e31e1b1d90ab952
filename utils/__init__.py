"""
utils/ - Shared Helpers
=======================
Logging setup and the move-token codec.
"""
