"""Services - encoding, prompts, validation and history."""
