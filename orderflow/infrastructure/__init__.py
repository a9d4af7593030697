"""
Couche infrastructure d'OrderFlow.

Ce module contient les implementations concretes des interfaces definies
dans la couche domaine (ports) pour le store local :

- persistence/ : Stockage relationnel avec SQLModel (modeles, mappers,
  repositories versionnes et Unit of Work)

Les passerelles externes et le store de session sont dans adapters/.
"""
