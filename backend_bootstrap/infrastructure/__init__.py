"""
Backend Connectors
==================

One module per external backend:
- database: relational database through SQLAlchemy
- cache: Redis
- broker: RabbitMQ through kombu

Each module exposes a ``connect_*`` function returning a live handle and a
matching ``close_*`` function.
"""
