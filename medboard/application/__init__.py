"""Application layer: DTOs, ports (Protocols), and the auth services."""
