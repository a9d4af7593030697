"""
Objets valeur immutables representant des concepts du domaine sans identite.

Les objets valeur sont definis par leurs attributs plutot que par une identite.
Ils sont immutables et peuvent etre librement partages et compares par valeur.

Exports :
- Money : Montant monétaire avec devise
- Inventory : Quantité en stock et quantité réservée
"""

from orderflow.core.value_objects.money import Money
from orderflow.core.value_objects.inventory import Inventory

__all__ = [
    "Money",
    "Inventory",
]
