"""formrules - field-cluster validation and error prioritisation for GOV.UK forms."""

__version__ = "0.1.0"
