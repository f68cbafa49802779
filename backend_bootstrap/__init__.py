"""
Backend Bootstrap
=================

Reads ``config/config.yaml``, opens the database, Redis and RabbitMQ
connections, verifies each one and closes them again.
"""

__version__ = "1.0.0"
