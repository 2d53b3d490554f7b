"""Command line interface for bplistcodec."""
