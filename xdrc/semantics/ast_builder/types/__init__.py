"""Declaration and type specifier parsing."""
