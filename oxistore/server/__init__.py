"""HTTP surface for OxiStorage."""
