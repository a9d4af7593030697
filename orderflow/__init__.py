"""
OrderFlow - Orchestration de workflows metier multi-ressources.

Ce package coordonne des workflows (inscription d'un utilisateur, passage
de commande, ajustement de stock) qui touchent plusieurs ressources
independantes : base locale, processeur de paiement, gestionnaire de stock
et canal de notification.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, objets valeur, ports, erreurs)
- services/ : Couche application (sagas, unit of work, cas d'utilisation)
- infrastructure/ : Persistance SQLModel (modeles, mappers, repositories)
- adapters/ : Passerelles externes (HTTP, stubs), stockage de session, CLI
- web/ : API JSON FastAPI
"""

__version__ = "0.1.0"
