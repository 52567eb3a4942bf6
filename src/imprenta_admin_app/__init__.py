"""Page controllers for the print shop admin client."""
