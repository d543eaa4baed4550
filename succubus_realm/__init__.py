"""Succubus Realm: JSON-file data core for the swipe-to-like character demo."""
