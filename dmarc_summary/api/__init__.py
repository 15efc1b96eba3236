"""Client side of the dmarc-srg summary endpoint."""
