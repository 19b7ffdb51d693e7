"""Routing — template compiler, cached matcher, and route registry.

Templates are compiled lazily on first match and cached until the
route set changes.
"""
