"""Schema inference and row translation for statistics log lines."""
