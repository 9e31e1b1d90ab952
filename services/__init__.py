"""
services/ - Business Logic Layer
================================
Services coordinate domain models and repositories for the handlers.
"""
