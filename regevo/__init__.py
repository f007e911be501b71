"""RegEvo – evolving register-machine programs toward a sorting routine."""

__version__ = "0.1.0"
