"""Terminal display for buildlens view results.

Modules
-------
renderer
    ``ViewRenderer`` turns page models into Rich renderables and follows
    growing build logs in ``Rich.Live`` mode.
"""
