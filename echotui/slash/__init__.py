"""Slash commands, saved prompts, popup state and popup rendering."""