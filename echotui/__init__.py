"""Terminal UI building blocks: transcripts, layout, a status line and a slash-command popup."""

__version__ = "0.1.0"