"""HTTP front end for the dispatch coordinator."""
