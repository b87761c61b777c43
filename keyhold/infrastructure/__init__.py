"""Infrastructure adapters (persistence, security, messaging, email, logging)."""
