"""MediaLens core: normalization, catalog matching, parsing, detection and grouping."""
