"""
db/ - Storage Layer
===================
Handles the Redis connection and the low-level lock primitive.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
