"""Built-in column validation rules."""
