from .loader import load_snapshot, parse_snapshot

__all__ = ["load_snapshot", "parse_snapshot"]
