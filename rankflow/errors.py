"""Exception types raised by rankflow components."""

from __future__ import annotations


class RankflowError(RuntimeError):
    """Base class for errors raised by rankflow."""


class ConfigError(RankflowError):
    """The YAML configuration could not be read or holds invalid values."""


class CrawlSessionError(RankflowError):
    """The browser driver backing a crawl session could not be started."""


class ParseError(RankflowError):
    """A fetched page did not contain any ranking entries."""


class UnknownSourceError(RankflowError):
    """A source name was requested that is not configured."""
