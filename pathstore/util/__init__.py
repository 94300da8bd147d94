"""Building blocks of PathStore: path parsing, tree operations and signals."""
