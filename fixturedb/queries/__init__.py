"""Join and aggregate query shapes of the exercise datasets."""

from . import movies, shopify

__all__ = ["movies", "shopify"]
