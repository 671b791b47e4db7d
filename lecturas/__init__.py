"""Daily liturgical readings service for the cancionero litúrgico."""

__version__ = "0.1.0"
