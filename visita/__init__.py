"""VISITA review service: church record workflow and audit trail."""
