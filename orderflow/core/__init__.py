"""
Couche domaine (core).

Contient les entités métier, les objets valeur, les ports (interfaces
abstraites), la machine à états des commandes et la taxonomie d'erreurs.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités métier (User, Order, Product, StockMovement)
- ports/ : Interfaces abstraites (repositories, passerelles, unit of work, session)
- value_objects/ : Objets valeur immutables (Money, Inventory)
"""
