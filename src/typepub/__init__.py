"""Publish Markdown documents to metaWeblog blogs over XML-RPC.

The metadata header at the top of each document records what was
published (title, tags, categories, draft flag, time, remote id, slug).
"""

__version__ = "0.1.0"
