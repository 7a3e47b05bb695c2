"""dotsphere - cluster DOT graphs and seed a 3D force-directed layout."""

__version__ = "0.1.0"
