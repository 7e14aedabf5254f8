"""Helpers for GitHub Actions: shell execution, action inputs and check runs."""
