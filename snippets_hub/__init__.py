"""SnippetsHub persistence core: snippets, organisation entities and todos on embedded SQLite."""
