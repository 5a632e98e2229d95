"""Command line utilities for operating a Threadboard deployment."""
