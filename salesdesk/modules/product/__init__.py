"""
Product module package exports.

- ProductController: product list with a category filter and product CRUD.
"""

from .controller import ProductController

__all__ = ["ProductController"]
