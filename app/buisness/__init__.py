"""
Business layer for the order ledger.
Contains the transaction workflows, the inventory store and the unit of work,
separated from data persistence concerns.
"""
