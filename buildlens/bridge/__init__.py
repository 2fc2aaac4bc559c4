"""Bridge layer between buildlens views and the remote build service.

Modules
-------
backend
    The ``BuildBackend`` protocol: one method per single-shot remote query.
http_backend
    ``HttpBackend`` — the protocol over the build service's REST API,
    using ``requests`` and parsing XML payloads at the boundary.
memory_backend
    ``InMemoryBackend`` — seeded, network-free backend for tests and the
    ``buildlens demo`` command.
access
    The ``AccessGate`` protocol plus allow-all and denylist gates.
"""
