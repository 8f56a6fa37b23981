"""FastMCP surface for docuindex."""
