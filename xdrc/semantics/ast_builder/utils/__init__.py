"""Parse tree navigation and literal helpers for the AST builder."""
