"""HTTP API for prompt triage and session scorecards."""
