"""
Shared Kernel Module
====================

Generic infrastructure used by every stage of the bootstrap.
"""
