"""Command line front end: fetch, cache, and report."""
