"""A small command shell with pipelines, logical lists, groupings, redirections, heredocs and wildcards."""

__version__ = "0.1.0"