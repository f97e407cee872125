"""Editorial catalogue of regions and destinations."""
