"""
Control-protocol front-end: tool catalog, registry dispatch and result envelopes.
"""
