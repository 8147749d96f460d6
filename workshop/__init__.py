"""
Workshop - Noyau de gestion d'un atelier de reparation automobile.

Ce package gere les ordres de service, les devis et le registre de stock
des pieces, avec les regles d'autorisation par role.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur, politiques)
- services/ : Couche application (cas d'utilisation, orchestration)
- infrastructure/ : Persistance SQLModel, horloge, bus d'evenements
- adapters/ : Interface ligne de commande
"""
