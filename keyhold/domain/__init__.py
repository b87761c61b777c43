"""Domain layer - Pure business logic.

This layer contains the core business entities, value objects, protocols
(ports), domain events and validation rules. The domain layer has NO
dependencies on any framework or infrastructure.

Structure:
- entities/: Domain entities (mutable, have identity)
- value_objects/: Value objects (immutable, no identity)
- protocols/: Domain protocols (repository capabilities, service interfaces)
- events/: Domain events (things that happened in the domain)
- validators/: Pure field validation rules
"""
