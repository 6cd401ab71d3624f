"""
finance_importer: bring bank exports (CSV / JSON) and tracker backups into a
personal finance ledger.
"""

__version__ = "0.1.0"
