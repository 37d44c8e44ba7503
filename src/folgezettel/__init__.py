"""folgezettel - link aliasing and folgezettel indentation for Markdown vaults."""

__version__ = "0.3.0"
