"""FListBot: assign Discord roles from F-List character kinks."""

__version__ = "1.0.0"
