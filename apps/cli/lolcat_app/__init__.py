"""neo-lolcat command-line application."""
