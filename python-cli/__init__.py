"""stegpng command line front end."""
