"""Adapter package for notifier implementations.

Purpose:
    Collect concrete implementations of the ``Notifier`` port (logging,
    in-memory recording, and HTTP webhook delivery) used by scenarios.

Dependencies:
    ``notifier_webhook`` depends on ``requests``; the other adapters only use
    the standard library.

Call context:
    ``LogNotifier`` is resolved lazily as the shared default by
    ``scenarist.usecases.scenario``. The others are wired by applications via
    ``Scenario.set_default_notifier`` or per instance, and by tests.
"""
