"""actorwrap -- wrap existing Scrapy projects so they run as actors."""

__version__ = "0.1.0"
