"""Directory — index and source-of-truth layer for application metadata.

The directory provides:
- Storage: one live record per source identifier
- Grouping: a company index derived from the stored records
- Lookup: query by source, or by company narrowed by title
"""
