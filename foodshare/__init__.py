"""FoodShare: surplus food marketplace service."""

__version__ = "1.0.0"
