"""
Test suite for the blog content index.

Test Categories:
- Unit tests: keyword extraction, front-matter parsing, slugs, facets, debouncing
- Index tests: building the post collection from a temporary content root
- Search tests: fuzzy matching, facet filtering and snippets
- Entry point tests: the search CLI and the feed generator
"""
