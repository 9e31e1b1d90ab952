"""
security/ - Middleware
======================
Decorators applied to handlers before they run.
"""
