"""Destination connectors for writing analysis results."""

from xml2schema.connectors.destinations.jsonl import JSONLDestination
from xml2schema.connectors import register_destination

# Register built-in destinations
register_destination("jsonl", JSONLDestination)
