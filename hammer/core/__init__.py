"""Hammer core: protocol tags, identity codec, configuration, auction engine and storage."""
