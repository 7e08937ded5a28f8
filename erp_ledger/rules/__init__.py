"""Pure business rules: no database, no HTTP."""
