"""stylecheck - conformance checker for the house Sass/CSS style guide."""

__version__ = "0.1.0"
