"""Use-case layer: the scenario base class and its exception dispatcher.

Scenarios coordinate domain logic and the notifier port without performing
transport I/O directly.
"""
