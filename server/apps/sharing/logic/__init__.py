"""Business logic layer for sharing app.

- share_operations: the share ledger (create, update, revoke, resolve)
- access_operations: access decisions for a (file, user) pair
- audit_operations: flattened access log per file
- expiry: expiry computation and checks
"""
