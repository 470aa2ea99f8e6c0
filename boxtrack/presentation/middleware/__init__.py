"""
Middleware layer for BoxTrack.

Cross-cutting request processing such as correlation IDs.
"""
