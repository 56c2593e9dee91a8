"""TCP echo server and client, with the pooled data structures used alongside them."""

__version__ = "0.1.0"