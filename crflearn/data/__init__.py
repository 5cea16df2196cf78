from .corpus import Attribute, Corpus, Instance, Item
from .dictionary import Dictionary

__all__ = ["Attribute", "Corpus", "Dictionary", "Instance", "Item"]
