"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Use these constants so collection names
stay consistent and act as the single source of truth for the "schema".

Composite indexes required by the audit log queries (descending timestamp):
    audit_logs: diocese ASC, timestamp DESC
    audit_logs: actor.uid ASC, timestamp DESC
    audit_logs: parish_id ASC, timestamp DESC
    audit_logs: resource_type ASC, resource_id ASC, timestamp DESC
"""

COLLECTION_CHURCHES = "churches"
COLLECTION_AUDIT_LOGS = "audit_logs"
COLLECTION_USERS = "users"
