"""GroupQuery: compile group search query strings into predicate trees."""

__version__ = "0.1.0"
