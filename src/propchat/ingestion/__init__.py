from .file_ingestor import load_properties_from_csv, parse_bool

__all__ = [
    "load_properties_from_csv",
    "parse_bool",
]
