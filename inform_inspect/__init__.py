"""inform-inspect command-line tool."""
