"""Command line interface for the Ebisu recall model."""
