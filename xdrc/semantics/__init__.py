"""Semantic layer: AST, type descriptions, symbol table and resolution passes."""
