"""Opening repertoire trainer core."""
