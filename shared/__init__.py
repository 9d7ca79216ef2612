"""
Shared Kernel

Value objects, domain events, the unit of work and the error taxonomy used
by every app of the project.
"""
