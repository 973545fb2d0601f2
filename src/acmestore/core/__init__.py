"""Cross-cutting concerns: logging and trace context."""
