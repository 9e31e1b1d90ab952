"""
models/ - Domain Layer
======================
Board, players, games and the errors a move can fail with.
Pure Python; no I/O happens here.
"""
