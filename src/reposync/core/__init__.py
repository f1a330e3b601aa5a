"""Core repository services for reposync."""
