"""Company Site Finder: locate a company's official website from its name."""

__version__ = "0.1.0"
