"""Per-definition parsers: const, typedef, struct, enum, union."""
