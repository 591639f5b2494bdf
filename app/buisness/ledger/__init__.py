"""
Ledger business layer: orders and bills and their effect on stock.

- source_ref - typed references to transaction sources
- transaction_draft - payload coercion and required-field checks
- transaction_ledger - create / soft-delete / edit workflows
"""
