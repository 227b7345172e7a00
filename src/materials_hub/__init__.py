"""Materials hub: a single-account dashboard of project links, grouped by
category, with drag & drop ordering. Auth and storage are delegated to a
managed backend."""

__version__ = "0.1.0"
