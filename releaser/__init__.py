"""Stage application builds and generate Inno Setup installer scripts."""

__version__ = "2.2.0"
