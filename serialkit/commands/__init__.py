"""Command-line tools for listing, probing and exercising serial ports."""