"""Configuration package for cardmate."""
