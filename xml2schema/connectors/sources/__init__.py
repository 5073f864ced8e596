"""Source connectors for reading documents."""

from xml2schema.connectors.sources.local import LocalSource
from xml2schema.connectors import register_source

# Register built-in sources
register_source("local", LocalSource)
