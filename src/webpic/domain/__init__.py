"""Domain layer — orientation rules, variant geometry, artifacts, markup.

This layer depends only on the stdlib.  It never touches pixels or the
filesystem; it must never import from services, infrastructure, or config.
"""
