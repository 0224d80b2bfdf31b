"""
Pending Order Monitor

Finds orders left unfulfilled past a staleness threshold and posts a
batched alert to a Slack incoming webhook.
"""

__version__ = "0.1.0"
