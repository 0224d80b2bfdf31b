"""
Integration tests for the pending order monitor.

These tests run the scheduled entry point and the local runner against a
real SQLite file with a recording webhook transport in place of Slack.
"""
