"""Resource discovery, runtime-configuration reporting and response validation for network probers."""

__version__ = "0.1.0"