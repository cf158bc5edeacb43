"""Tree-sitter source walkers that drive the converter."""
