"""Built-in command groups registered on the root ``appwrite`` application."""
