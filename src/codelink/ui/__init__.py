"""User interfaces built on top of the codelink pipeline."""
