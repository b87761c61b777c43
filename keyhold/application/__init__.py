"""Application layer - Use cases and orchestration.

Structure:
- commands/: Command dataclasses and handlers (write operations)
- queries/: Query dataclasses and handlers (read operations)
- dtos/: Response envelopes returned by handlers
- validation.py: Pre-handler request validation gate
- handler_boundary.py: Shared exception-to-result boundary for handlers

The application layer orchestrates domain capabilities but contains no
persistence or HTTP details.
"""
