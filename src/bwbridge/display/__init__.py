"""Output rendering for bwbridge."""
