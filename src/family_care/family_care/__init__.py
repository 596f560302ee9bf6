"""Family Care package.

This package is organized by feature modules (staff, families, events, ...)
with a thin Flask controller layer and service/repository layers.
"""
