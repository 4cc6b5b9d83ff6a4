"""webpic — responsive image derivatives and <picture> markup."""

__version__ = "0.3.0"
