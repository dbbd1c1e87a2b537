"""Star-schema model and report measures built from an e-commerce order export."""
