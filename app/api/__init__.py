"""Omifem JSON API controllers.

Controllers are imported from their modules (``app.api.styles`` etc.) by
``app.routes``.
"""
