"""Analysis: run metadata fold, projection recorder and sensitivity sweep."""
