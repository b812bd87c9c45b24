"""Markdown extensions bundled with codelink."""
