"""Infrastructure layer: persistence, security primitives, outbound services."""
