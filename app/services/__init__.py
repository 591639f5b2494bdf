"""
Services Layer
Read-only query services over the ledger, used by callers that list or show
transactions.

Services should:
- Not modify data; writes go through the business layer
- Be stateless
- Handle filtering and ordering for display
"""
