from .backup_data import BACKUP_VERSION, BackupData
from .category_item import CategoryItem, SubcategoryItem
from .transaction import Transaction

__all__ = ["BACKUP_VERSION", "BackupData", "CategoryItem", "SubcategoryItem", "Transaction"]
