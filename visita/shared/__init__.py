"""Cross-cutting helpers shared by all layers (enums, telemetry, utils)."""
