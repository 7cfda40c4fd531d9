"""
Raw Data Stream Relay
=====================

Relays a raw binary byte stream from a receiver device to a publish channel
and/or a timestamped log file, and records streams received from a channel.

This package provides the session component, the channel message codec,
pluggable channel backends and a small command-line front end.
"""

__version__ = "0.1.0"
__author__ = "Raw Stream"
