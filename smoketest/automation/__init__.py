"""Application driver, reporting helpers and error types."""
