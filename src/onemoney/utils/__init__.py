"""
Utility functions used when preparing transactions.
"""
