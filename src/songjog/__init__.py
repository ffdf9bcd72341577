"""songjog: volunteer event normalization, metrics and listing."""

__version__ = "0.4.0"
