"""Core view logic: pure calculators, the log reader and the orchestrator.

Modules
-------
revision_window
    Which revision numbers belong on a page.
diff_budget
    How many rendered diff lines each changed file may show.
multibuild
    ``base`` / ``base:flavor`` package identifiers.
log_reader
    ``LogChunkReader`` — next byte range of a growing remote log.
job_status
    ``JobStatusSummarizer`` — worker id and elapsed build time.
artifact_view
    ``ArtifactView`` — runs the above against a backend and returns
    tagged view results.
"""
