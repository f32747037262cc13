from .products_repo import Product, ProductsRepo
from .categories_repo import Category, CategoriesRepo
from .sales_repo import Sale, SaleItem, SalesRepo
from .stats_repo import DailySales, MonthlyRevenue, StatsRepo

__all__ = [
    "Product",
    "ProductsRepo",
    "Category",
    "CategoriesRepo",
    "Sale",
    "SaleItem",
    "SalesRepo",
    "DailySales",
    "MonthlyRevenue",
    "StatsRepo",
]
