"""Schedule generation core: prompts, relay client, extraction, normalization and grid placement."""
