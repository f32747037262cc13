"""
Categories module package exports.

- CategoriesController: category list and CRUD; deleting a category that
  still holds products is refused.
"""

from .controller import CategoriesController

__all__ = ["CategoriesController"]
