"""Django project package for Shepherd Connect."""
