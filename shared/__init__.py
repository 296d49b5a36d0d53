"""
Shared Kernel

Domain building blocks (entities, value objects, errors), the unit of work,
the message bus and the Result type used by every SewaHub app.
"""
