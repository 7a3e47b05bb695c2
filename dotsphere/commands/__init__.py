"""Command implementations behind the dotsphere CLI."""
