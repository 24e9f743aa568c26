# pyagree/data/__init__.py
from pyagree.data.tables import DistributionTable, as_distribution_table, pad_categories

__all__ = [
    "DistributionTable",
    "as_distribution_table",
    "pad_categories",
]
